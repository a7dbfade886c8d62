"""
Main FastAPI application entry point.
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tatdocs.api import catalog, chat, documents, saved_shipments, shipments
from tatdocs.db.database import engine, Base, settings
from tatdocs.services.shipment_session import ShipmentSession
import tatdocs.models  # noqa: F401  registers tables on Base

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="TAT Docs",
    description="Export shipment documents for Texas American Trade",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Single-editor shipment form shared by all routers
app.state.shipment_session = ShipmentSession()

# Include routers
app.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])
app.include_router(shipments.router, prefix="/api/shipments", tags=["shipments"])
app.include_router(saved_shipments.router, prefix="/api/saved-shipments", tags=["saved-shipments"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])


@app.get("/")
async def root():
    return {"message": "TAT Docs API"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
