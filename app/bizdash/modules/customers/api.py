from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from app.bizdash.modules.customers.errors import CustomerError, CustomerNotFound, EmailExists, FieldError, ValidationError
from app.bizdash.modules.customers.schemas import (
    DEFAULT_PAGE_SIZE,
    parse_list_filters,
    validate_create_payload,
    validate_update_payload,
)
from app.bizdash.modules.customers.service import CustomerService
from app.bizdash.utils import parse_int


def _customer_id(raw: str) -> int:
    customer_id = parse_int(raw)
    if customer_id is None:
        raise ValidationError([FieldError(("id",), "Customer id must be an integer.")], message="Invalid customer ID")
    return customer_id


def _error_response(e: CustomerError, status: int):
    body: dict = {"error": str(e)}
    if e.details:
        body["details"] = [d.to_dict() for d in e.details]
    return jsonify(body), status


def build_customers_blueprint(service: CustomerService, *, default_page_size: int = DEFAULT_PAGE_SIZE) -> Blueprint:
    """
    JSON routes for customers. The service is passed in by the app factory
    so each app instance owns exactly one service and repository.
    """
    bp = Blueprint("customers", __name__)

    @bp.get("/customers")
    def customers_list():
        filters = parse_list_filters(request.args, default_limit=default_page_size)
        page = service.list_customers(filters)
        return jsonify({"data": [c.to_dict() for c in page.data], "pagination": page.pagination()})

    @bp.post("/customers")
    def customers_create():
        data = validate_create_payload(request.get_json(silent=True))
        c = service.create_customer(data)
        return jsonify({"data": c.to_dict(), "message": "Customer created successfully"}), 201

    @bp.get("/customers/<customer_id>")
    def customers_detail(customer_id: str):
        c = service.get_customer(_customer_id(customer_id))
        if c is None:
            return jsonify({"error": "Customer not found"}), 404
        return jsonify({"data": c.to_dict()})

    @bp.put("/customers/<customer_id>")
    def customers_update(customer_id: str):
        cid = _customer_id(customer_id)
        changes = validate_update_payload(request.get_json(silent=True))
        c = service.update_customer(cid, changes)
        return jsonify({"data": c.to_dict(), "message": "Customer updated successfully"})

    @bp.delete("/customers/<customer_id>")
    def customers_delete(customer_id: str):
        service.delete_customer(_customer_id(customer_id))
        return jsonify({"message": "Customer deleted successfully"})

    @bp.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        current_app.logger.debug("Validation failed (request_id=%s): %s", getattr(g, "request_id", None), e.details)
        return _error_response(e, 400)

    @bp.errorhandler(CustomerNotFound)
    def _not_found(e: CustomerNotFound):
        return _error_response(e, 404)

    @bp.errorhandler(EmailExists)
    def _email_exists(e: EmailExists):
        return _error_response(e, 409)

    return bp
