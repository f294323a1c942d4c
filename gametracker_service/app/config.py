import os

from dotenv import find_dotenv, load_dotenv


def load_env(path: str | None = None) -> bool:
    """Подгружает переменные из .env (по умолчанию ищется от текущего каталога).

    Уже заданные в окружении переменные не перезаписываются.
    """
    path = path or find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path)


# .env читается до того, как остальные модули возьмут настройки из окружения.
load_env(os.getenv("DOTENV_PATH"))

# URL подключения к MongoDB; имя базы берётся из пути URL.
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/gametracker")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
DB_CONNECT_ATTEMPTS = int(os.getenv("DB_CONNECT_ATTEMPTS", "30"))

SERVICE_NAME = os.getenv("SERVICE_NAME", "gametracker_service")
