# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from config import settings
from database import init_db
from services.exceptions import StockError
from utils.logging_setup import setup_logging

load_dotenv()
setup_logging(settings)
logger = logging.getLogger(__name__)

# Import routerów
from routes.stock import router as stock_router
from routes.operations import router as operations_router
from routes.products import router as products_router
from routes.settings import router as settings_router

# Inicjalizacja
init_db()

app = FastAPI(title="Stock Master API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Ledger rejections: validation 400, not found 404, conflicts 409
@app.exception_handler(StockError)
async def stock_error_handler(request: Request, exc: StockError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Anything else is an infrastructure failure; the transaction was rolled back
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error", "code": "INTERNAL_ERROR"})


# Rejestracja routerów
app.include_router(products_router)
app.include_router(operations_router)
app.include_router(settings_router)
app.include_router(stock_router, prefix="/stock")

@app.get("/")
def read_root():
    return {"message": "Stock Master API is running"}
