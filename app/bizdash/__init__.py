import logging
import os
import uuid

from flask import Flask, g, jsonify, request
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException

from app.bizdash.config import load_config
from app.bizdash.db import init_db, teardown_db_session
from app.bizdash.modules.customers.api import build_customers_blueprint
from app.bizdash.modules.customers.repository import CustomerRepository, SqlAlchemyCustomerRepository
from app.bizdash.modules.customers.service import CustomerService
from app.bizdash.routes import bp as routes_bp, dashboard_bp


def _configure_logging(app: Flask) -> None:
    level = app.config.get("LOG_LEVEL") or "INFO"
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(level)
    logging.getLogger("app.bizdash").setLevel(level)


def create_app(customer_repository: CustomerRepository | None = None) -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.json.sort_keys = False
    _configure_logging(app)

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    # One repository and one service per app; routes receive the service explicitly.
    if customer_repository is None:
        customer_repository = SqlAlchemyCustomerRepository(app.extensions["sqlalchemy_sessionmaker"])
    customer_service = CustomerService(customer_repository)
    app.extensions["customer_service"] = customer_service

    api_prefix = app.config["API_PREFIX"]
    app.register_blueprint(routes_bp)
    app.register_blueprint(
        build_customers_blueprint(customer_service, default_page_size=app.config["DEFAULT_PAGE_SIZE"]),
        url_prefix=api_prefix,
    )
    app.register_blueprint(dashboard_bp, url_prefix=api_prefix)

    @app.before_request
    def _assign_request_id():
        g.request_id = (request.headers.get("X-Request-ID") or "").strip()[:64] or uuid.uuid4().hex

    @app.after_request
    def _echo_request_id(response):
        rid = getattr(g, "request_id", None)
        if rid:
            response.headers["X-Request-ID"] = rid
        return response

    app.teardown_appcontext(teardown_db_session)

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):  # type: ignore[no-redef]
        return jsonify({"error": e.description or e.name}), e.code or 500

    @app.errorhandler(Exception)
    def _err_500(e: Exception):  # type: ignore[no-redef]
        # Full trace goes to the log; the client gets no detail.
        app.logger.exception("Unhandled error on %s %s (request_id=%s)", request.method, request.path, getattr(g, "request_id", None))
        return jsonify({"error": "Internal server error"}), 500

    app.logger.info("create_app() complete; app ready to serve (env=%s, api_prefix=%s)", env or "(unset)", api_prefix)

    return app
