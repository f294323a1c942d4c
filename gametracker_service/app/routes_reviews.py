import logging

from fastapi import APIRouter, Depends, HTTPException, status

from .db import BACKEND_ERRORS
from .logging_setup import SERVICE_NAME
from .repositories import ReviewRepository, get_review_repository
from .schemas import MessageOut, ReviewCreate, ReviewOut, ReviewUpdate, ReviewWithGame

router = APIRouter(prefix="/api/resenas", tags=["reviews"])

logger = logging.getLogger(SERVICE_NAME)


@router.get(
    "",
    response_model=list[ReviewWithGame],
    summary="Все рецензии",
    description="Возвращает все рецензии, новые сверху; вместо gameId подставлена запись игры (null, если игра удалена).",
)
async def list_reviews(reviews: ReviewRepository = Depends(get_review_repository)):
    try:
        return await reviews.list_with_games()
    except BACKEND_ERRORS:
        logger.exception("Failed to list reviews")
        raise HTTPException(status_code=500, detail="Error fetching reviews")


@router.get(
    "/juego/{game_id}",
    response_model=list[ReviewOut],
    summary="Рецензии игры",
    description="Возвращает рецензии одной игры, новые сверху. gameId остаётся идентификатором.",
)
async def list_game_reviews(game_id: str, reviews: ReviewRepository = Depends(get_review_repository)):
    """Возвращает рецензии с указанным gameId (пустой список, если их нет)."""
    try:
        return await reviews.list_by_game(game_id)
    except BACKEND_ERRORS:
        logger.exception("Failed to list reviews of game %s", game_id)
        raise HTTPException(status_code=500, detail="Error fetching reviews")


@router.post(
    "",
    response_model=ReviewOut,
    status_code=status.HTTP_201_CREATED,
    summary="Добавить рецензию",
    description="Создаёт рецензию. content и gameId обязательны; существование игры не проверяется.",
)
async def create_review(data: ReviewCreate, reviews: ReviewRepository = Depends(get_review_repository)):
    try:
        return await reviews.create(data)
    except BACKEND_ERRORS:
        logger.exception("Failed to create review")
        raise HTTPException(status_code=500, detail="Error creating review")


@router.put(
    "/{review_id}",
    response_model=ReviewOut,
    summary="Обновить рецензию",
    description="Перезаписывает переданные поля рецензии.",
)
async def update_review(
    review_id: str,
    data: ReviewUpdate,
    reviews: ReviewRepository = Depends(get_review_repository),
):
    try:
        review = await reviews.update(review_id, data.model_dump(by_alias=True, exclude_unset=True))
    except BACKEND_ERRORS:
        logger.exception("Failed to update review %s", review_id)
        raise HTTPException(status_code=400, detail="Error updating review")
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@router.delete(
    "/{review_id}",
    response_model=MessageOut,
    summary="Удалить рецензию",
)
async def delete_review(review_id: str, reviews: ReviewRepository = Depends(get_review_repository)):
    try:
        review = await reviews.delete(review_id)
    except BACKEND_ERRORS:
        logger.exception("Failed to delete review %s", review_id)
        raise HTTPException(status_code=500, detail="Error deleting review")
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return {"message": "Review deleted successfully"}
