from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from exhibit_guide.config import Settings, build_provider
from exhibit_guide.generation import ContentGenerator
from exhibit_guide.llm import ChatProvider
from exhibit_guide.routes import router
from exhibit_guide.storage import Storage

load_dotenv(Path(__file__).parent.parent / ".env")


def create_app(settings: Settings | None = None, provider: ChatProvider | None = None) -> FastAPI:
    resolved = settings or Settings.from_env()
    storage = Storage(resolved.data_dir)
    llm = provider or build_provider(resolved)

    app = FastAPI(title="Exhibit Guide")
    app.state.settings = resolved
    app.state.storage = storage
    app.state.provider = llm
    app.state.generator = ContentGenerator(
        catalog=storage,
        audit_log=storage,
        provider=llm,
        max_tokens=resolved.max_tokens,
        populate_max_tokens=resolved.populate_max_tokens,
        temperature=resolved.temperature,
    )
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses environment settings)
app = create_app()
