# walletshop/main.py
import uvicorn

from walletshop.api import create_app
from walletshop.data.database import Base, engine
from walletshop.data.seed import seed
from walletshop.utils.settings import SEED_ON_STARTUP
from walletshop.utils.logging import get_logger

# IMPORT WSZYSTKICH MODELI NA POCZATKU (PRZED JAKIMKOLWIEK CREATE_ALL)
import walletshop.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db():
    logger.info(f"Models registered in Base.metadata: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    if SEED_ON_STARTUP:
        seed()


init_db()

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
