"""
FastAPI сервер реестра сертификатов
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import Settings, get_settings, setup_logging
from gemcert.api import CertificateAPI
from gemcert.database import CertificateRepository, DatabaseManager
from gemcert.seed import SeedSet, empty_seed_set
from gemcert.service import CertificateService
from gemcert.storage import ObjectStorage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    logging.info("Запуск API сервера...")

    # Если БД недоступна при старте, таблицы создаются при первом обращении к ней
    db_manager = app.state.certificate_api.service.repository.db_manager
    try:
        db_manager.create_tables()
    except Exception as e:
        logging.warning(f"Не удалось подготовить таблицы БД: {e}")

    yield

    logging.info("Остановка API сервера...")
    db_manager.engine.dispose()


def create_app(settings: Settings = None, service: CertificateService = None) -> FastAPI:
    """Создание FastAPI приложения"""
    settings = settings or get_settings()
    settings.create_directories()
    setup_logging(settings)

    app = FastAPI(
        title="Gemstone Certificate Registry",
        description="Реестр геммологических сертификатов",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    if service is None:
        db_manager = DatabaseManager(settings.sqlalchemy_url, settings.db_timeout)
        seed_set = SeedSet() if settings.seed_fallback else empty_seed_set()
        service = CertificateService(CertificateRepository(db_manager), seed_set)

    object_storage = ObjectStorage(settings.objects_path)
    certificate_api = CertificateAPI(service, object_storage, settings.api_key)
    app.state.certificate_api = certificate_api

    @app.get("/health", tags=["monitoring"])
    def health_check():
        """Проверка здоровья API, БД и хранилища"""
        health_status = {
            "status": "checking",
            "timestamp": datetime.now().isoformat(),
            "components": {}
        }

        health_status["components"]["api"] = {
            "status": "healthy",
            "message": "API is running"
        }

        if service.repository.db_manager.health_check():
            health_status["components"]["database"] = {
                "status": "healthy",
                "message": "Database connection is active"
            }
        else:
            health_status["components"]["database"] = {
                "status": "unhealthy",
                "message": f"Database unavailable, {len(service.seed_set)} sample certificates served"
            }

        objects_path = object_storage.base_path
        if objects_path.exists() and objects_path.is_dir():
            health_status["components"]["object_storage"] = {
                "status": "healthy",
                "message": f"Objects directory exists: {objects_path}"
            }
        else:
            health_status["components"]["object_storage"] = {
                "status": "unhealthy",
                "message": "Objects directory not found"
            }

        all_healthy = all(
            comp.get("status") == "healthy"
            for comp in health_status["components"].values()
        )
        health_status["status"] = "healthy" if all_healthy else "unhealthy"

        return JSONResponse(content=health_status, status_code=200 if all_healthy else 503)

    # Маршруты реестра подключаются после собственных, иначе "/" перекроет /health
    app.mount("/", certificate_api.app)

    return app


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "api_server:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        workers=1 if settings.debug else 4
    )
