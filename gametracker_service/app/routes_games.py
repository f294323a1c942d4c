import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from .db import BACKEND_ERRORS
from .logging_setup import SERVICE_NAME
from .repositories import GameRepository, ReviewRepository, get_game_repository, get_review_repository
from .schemas import GameCreate, GameDeletedOut, GameOut, GameUpdate

router = APIRouter(prefix="/api/juegos", tags=["games"])

logger = logging.getLogger(SERVICE_NAME)


@router.get(
    "",
    response_model=list[GameOut],
    summary="Список игр",
    description="Возвращает все игры, новые сверху (по dateAdded). Без пагинации и фильтров.",
)
async def list_games(games: GameRepository = Depends(get_game_repository)):
    """Возвращает все игры, отсортированные по дате добавления (по убыванию)."""
    try:
        return await games.list_all()
    except BACKEND_ERRORS:
        logger.exception("Failed to list games")
        raise HTTPException(status_code=500, detail="Error fetching games")


@router.get(
    "/{game_id}",
    response_model=GameOut,
    summary="Получить игру",
    description="Возвращает одну игру по идентификатору.",
)
async def get_game(game_id: str, games: GameRepository = Depends(get_game_repository)):
    try:
        game = await games.get(game_id)
    except BACKEND_ERRORS:
        logger.exception("Failed to fetch game %s", game_id)
        raise HTTPException(status_code=500, detail="Error fetching game")
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.post(
    "",
    response_model=GameOut,
    status_code=status.HTTP_201_CREATED,
    summary="Добавить игру",
    description="Создаёт игру. title обязателен, rating в диапазоне 0..5; остальные поля получают значения по умолчанию.",
)
async def create_game(data: GameCreate, games: GameRepository = Depends(get_game_repository)):
    """Сохраняет новую игру и возвращает её вместе с выданным `_id`."""
    try:
        return await games.create(data)
    except BACKEND_ERRORS:
        logger.exception("Failed to create game")
        raise HTTPException(status_code=500, detail="Error creating game")


@router.put(
    "/{game_id}",
    response_model=GameOut,
    summary="Обновить игру",
    description="Перезаписывает переданные поля игры. Ограничения полей проверяются так же, как при создании.",
)
async def update_game(
    game_id: str,
    data: GameUpdate,
    games: GameRepository = Depends(get_game_repository),
):
    """Обновляет только те поля, которые реально переданы в теле запроса."""
    try:
        game = await games.update(game_id, data.model_dump(by_alias=True, exclude_unset=True))
    except BACKEND_ERRORS:
        logger.exception("Failed to update game %s", game_id)
        raise HTTPException(status_code=400, detail="Error updating game")
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.delete(
    "/{game_id}",
    response_model=GameDeletedOut,
    summary="Удалить игру",
    description=(
        "Удаляет игру, затем все её рецензии. Два шага не атомарны: если игра удалена, "
        "а рецензии нет, возвращается 500 с признаком partial."
    ),
)
async def delete_game(
    game_id: str,
    games: GameRepository = Depends(get_game_repository),
    reviews: ReviewRepository = Depends(get_review_repository),
):
    """Удаляет игру и каскадно её рецензии (двухфазно, без транзакции)."""
    try:
        game = await games.delete(game_id)
    except BACKEND_ERRORS:
        logger.exception("Failed to delete game %s", game_id)
        raise HTTPException(status_code=500, detail="Error deleting game")
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")

    # Игра уже удалена: отката нет, поэтому сбой второго шага отдаём отдельным ответом.
    try:
        removed = await reviews.delete_by_game(game_id)
    except BACKEND_ERRORS:
        logger.exception("Game %s deleted, but its reviews were not removed", game_id)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Game deleted but its reviews could not be removed",
                "partial": True,
                "gameDeleted": True,
            },
        )

    logger.info("Game %s deleted with %s review(s)", game_id, removed)
    return GameDeletedOut(message="Game deleted successfully", deleted_reviews=removed)
