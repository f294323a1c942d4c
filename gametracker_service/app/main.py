import asyncio

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import DB_CONNECT_ATTEMPTS, HOST, MONGO_URI, PORT, SERVICE_NAME
from .db import Storage, create_storage
from .logging_setup import setup_logging
from .routes_games import router as games_router
from .routes_reviews import router as reviews_router


def _format_validation_errors(errors) -> str:
    """Собирает ошибки pydantic в одну строку вида `title: Field required; rating: ...`."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if err.get("type") == "json_invalid":
            # для битого JSON в loc лежит позиция символа, а не поле
            loc = []
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg')}")
    return "; ".join(parts) or "Invalid request"


def create_app(storage: Storage | None = None) -> FastAPI:
    """Собирает приложение. Хранилище можно передать явно (тесты), иначе оно создаётся при старте."""
    app = FastAPI(
        title="GameTracker API",
        description="Трекер видеоигр и рецензий (CRUD поверх MongoDB)",
        version="1.0.0",
    )
    app.state.storage = storage

    logger = setup_logging(SERVICE_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        """Логирует входящие и исходящие HTTP-запросы."""
        logger.info("IN %s %s", request.method, request.url.path)
        resp = await call_next(request)
        logger.info("OUT %s %s -> %s", request.method, request.url.path, resp.status_code)
        return resp

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        """Превращает ошибки валидации тела запроса в ответ 400."""
        logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": _format_validation_errors(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def http_handler(request: Request, exc: StarletteHTTPException):
        """Логирует штатные HTTP-ошибки (400/404/500) и возвращает их клиенту."""
        logger.info("HTTP error %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def any_handler(request: Request, exc: Exception):
        """Глобальный перехватчик: всё необработанное отдаём как 500 в том же формате."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.on_event("startup")
    async def on_startup():
        """Создаёт клиента MongoDB (если его не передали) и проверяет подключение."""
        if app.state.storage is None:
            app.state.storage = create_storage(MONGO_URI)

        for attempt in range(1, DB_CONNECT_ATTEMPTS + 1):
            try:
                await app.state.storage.ping()
                logger.info("Connected to MongoDB (attempt %s)", attempt)
                break
            except PyMongoError:
                logger.exception("MongoDB ping failed (attempt %s/%s). Retrying in 2s...", attempt, DB_CONNECT_ATTEMPTS)
                await asyncio.sleep(2)
        else:
            # Лучше упасть при старте, чем отвечать 500 на каждый запрос.
            raise RuntimeError("MongoDB connection failed after retries")

    @app.on_event("shutdown")
    async def on_shutdown():
        if app.state.storage is not None:
            app.state.storage.close()
            logger.info("MongoDB connection closed")

    @app.get("/", summary="Проверка работы")
    async def read_root():
        return {"message": "GameTracker API is running"}

    @app.get("/test", summary="Состояние базы данных")
    async def test_database():
        """Проверяет подключение к MongoDB и показывает первые коллекции."""
        response = {
            "backend": "running",
            "database": "not available",
            "database_name": None,
            "connection_status": "Not Connected",
            "collections": [],
        }
        storage = app.state.storage
        if storage is None:
            return response
        response["database_name"] = storage.db.name
        try:
            response["collections"] = (await storage.collection_names())[:10]
            response["database"] = "connected"
            response["connection_status"] = "Connected"
        except PyMongoError as e:
            logger.warning("Database check failed: %s", e)
            response["database"] = f"error: {str(e)[:80]}"
        return response

    app.include_router(games_router)
    app.include_router(reviews_router)

    return app


app = create_app()


def run() -> None:
    """Точка входа консольной команды `gametracker`."""
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    run()
