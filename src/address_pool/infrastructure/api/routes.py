# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry
from pydantic import BaseModel

from address_pool import __version__
from address_pool.allocation import AddressAllocationEngine, AddressRecordStore
from address_pool.application.services import AddressService, bootstrap_pool
from address_pool.infrastructure.api.error_handlers import install_error_handlers
from address_pool.infrastructure.api.middleware import MetricsMiddleware
from address_pool.infrastructure.config.settings import AppConfig, get_config
from address_pool.infrastructure.monitoring.logging_adapter import (
    CorrelationIdMiddleware,
    configure_json_logging,
)
from address_pool.infrastructure.monitoring.metrics import ServiceMetrics, build_metrics, render_metrics
from address_pool.infrastructure.persistence import (
    InMemoryAddressRecordStore,
    SQLAlchemyAddressRecordStore,
    create_schema,
    make_engine,
    make_session_factory,
)

logger = logging.getLogger(__name__)

MAPS_URL = "/maps"
VEHICLES_URL = "/vehicles"


class AddressOut(BaseModel):
    address: str
    city: str
    state: str
    zip: str


class PoolHealth(BaseModel):
    status: str
    total: int
    free: int
    held: int


@dataclass
class ApplicationContainer:
    config: AppConfig
    store: AddressRecordStore
    engine: AddressAllocationEngine
    service: AddressService
    metrics: ServiceMetrics


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_service(container: ApplicationContainer = Depends(get_container)) -> AddressService:
    return container.service


router = APIRouter()


@router.get(MAPS_URL, response_model=AddressOut)
def get_address(
    lat: float = Query(...),
    lon: float = Query(...),
    vehicle_id: int = Query(..., alias="vehicleId"),
    service: AddressService = Depends(get_service),
) -> AddressOut:
    postal = service.get_address(lat, lon, vehicle_id)
    return AddressOut(**postal.as_dict())


@router.delete(MAPS_URL, response_model=int)
def delete_address(
    vehicle_id: int = Query(..., alias="vehicleId"),
    service: AddressService = Depends(get_service),
) -> int:
    return service.delete_address(vehicle_id)


@router.get(f"{MAPS_URL}/count", response_model=int)
def address_count(service: AddressService = Depends(get_service)) -> int:
    return service.count()


@router.get(VEHICLES_URL, response_model=int)
def vehicle_count(service: AddressService = Depends(get_service)) -> int:
    return service.vehicle_count()


@router.get("/healthz", response_model=PoolHealth)
def healthz(container: ApplicationContainer = Depends(get_container)) -> PoolHealth:
    stats = container.engine.stats()
    return PoolHealth(status="ok", total=stats.total, free=stats.free, held=stats.held)


@router.get("/metrics")
def metrics(container: ApplicationContainer = Depends(get_container)) -> Response:
    return Response(content=render_metrics(container.metrics), media_type=CONTENT_TYPE_LATEST)


def build_store(config: AppConfig) -> AddressRecordStore:
    if config.store.backend == "sql":
        engine = make_engine(config.store.dsn)
        create_schema(engine)
        return SQLAlchemyAddressRecordStore(make_session_factory(engine))
    return InMemoryAddressRecordStore()


def create_app(
    config: AppConfig | None = None,
    *,
    store: AddressRecordStore | None = None,
    registry: CollectorRegistry | None = None,
    rng: random.Random | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    config = config or get_config()
    if configure_logging:
        configure_json_logging(
            logging.DEBUG if config.enable_debug_logs else logging.INFO,
            service_name=config.observability.service_name,
        )

    metrics = build_metrics(config.observability.metrics_namespace, registry)
    store = store or build_store(config)
    if rng is None and config.allocation.random_seed is not None:
        rng = random.Random(config.allocation.random_seed)
    engine = AddressAllocationEngine(store=store, rng=rng, metrics=metrics)
    bootstrap_pool(engine, config.seed)
    container = ApplicationContainer(
        config=config,
        store=store,
        engine=engine,
        service=AddressService(engine),
        metrics=metrics,
    )

    app = FastAPI(title="Vehicle Address Pool", version=__version__)
    app.state.container = container
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(router)
    install_error_handlers(app)
    stats = engine.stats()
    logger.info("app.ready", extra={"backend": config.store.backend, "pool_total": stats.total})
    return app


__all__ = ["ApplicationContainer", "build_store", "create_app", "router"]
