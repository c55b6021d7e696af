"""
Application factory: wires clients, services and routers into a FastAPI app.

One app is one till. It holds a single CartSession, so every cashier who
signs in at this till works the same active cart and the same held orders,
the way a shared register terminal does. Run one app per till.
"""

import logging

from fastapi import FastAPI

from api.base import success_response
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware
from api.register import create_register_router
from auth.api import create_auth_router
from auth.config import AuthConfig
from auth.manager import ManagerAuthorizer
from auth.security_middleware import AuthMiddleware
from auth.service import AuthService
from auth.session import SessionManager
from clients.pos_api_client import PosApiClient
from clients.valkey_client import ValkeyClient
from core.audit import AuditLogger, ValkeyAuditTrail
from core.cart import CartSession
from core.checkout import CheckoutService
from core.config import RegisterConfig, load_config
from core.event_bus import EventBus
from core.handlers.void_audit_handler import register_void_audit_handlers
from core.held_orders import ValkeyHeldOrderStore
from core.reference import ReferenceDataService

logger = logging.getLogger(__name__)


def create_app(
    config: RegisterConfig | None = None,
    auth_config: AuthConfig | None = None,
    api: PosApiClient | None = None,
    valkey: ValkeyClient | None = None,
) -> FastAPI:
    """
    Build the register app.

    Args:
        config: Register configuration (default: from POS_* environment)
        auth_config: Cashier sign-in configuration
        api: Back-office client (default: built from config)
        valkey: Valkey client (default: connects to config.valkey_url)

    Raises:
        redis.ConnectionError: If Valkey is unreachable
    """
    config = config or load_config()
    auth_config = auth_config or AuthConfig()
    api = api or PosApiClient(config.api_base_url, timeout_seconds=config.api_timeout_seconds)
    valkey = valkey or ValkeyClient(config.valkey_url)

    event_bus = EventBus()
    audit = AuditLogger(ValkeyAuditTrail(valkey, config.audit_log_key))
    register_void_audit_handlers(event_bus, audit)

    reference = ReferenceDataService(api, config)
    tax_rate = reference.tax_rate_percent()
    logger.info("Register tax rate: %s%%", tax_rate)

    session = CartSession(
        held_orders=ValkeyHeldOrderStore(valkey, config.held_orders_key),
        event_bus=event_bus,
        config=config,
        tax_rate_percent=tax_rate,
        manager_authorizer=ManagerAuthorizer(api, config),
    )
    checkout = CheckoutService(session, api, reference, config)
    session_manager = SessionManager(valkey, auth_config)
    auth_service = AuthService(api, session_manager)

    app = FastAPI(title="POS Register")
    app.state.session = session
    app.state.audit = audit

    register_error_handlers(app)

    # Added last runs first: request id is assigned before auth
    app.add_middleware(
        AuthMiddleware,
        session_manager=session_manager,
        cookie_name=auth_config.session_cookie_name,
    )
    app.add_middleware(RequestIDMiddleware)

    app.include_router(create_auth_router(auth_service, auth_config), prefix="/register")
    app.include_router(create_register_router(session, checkout, reference), prefix="/register")

    @app.get("/health")
    async def health():
        return success_response({"status": "ok"}).model_dump(mode="json")

    return app
