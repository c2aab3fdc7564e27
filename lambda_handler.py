"""
AWS Lambda handler for the Commission Projection API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os

from projection_engine import ScheduleCalculator
from projection_engine.service import ProjectionService

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")
VALIDATE_PAYMENT_TERMS = os.environ.get("VALIDATE_PAYMENT_TERMS", "false").lower() in ("1", "true", "yes")

# Initialize service (reused across warm invocations)
service = ProjectionService(ScheduleCalculator(validate_terms=VALIDATE_PAYMENT_TERMS))

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def _response(status_code, body):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(body)}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /projections
    - POST /projections/summary
    - POST /payment_terms/validate
    - GET /suppliers
    - GET /suppliers/match
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    elif path == "/projections" and http_method == "POST":
        return handle_projections(event)
    elif path == "/projections/summary" and http_method == "POST":
        return handle_summary(event)
    elif path == "/payment_terms/validate" and http_method == "POST":
        return handle_validate_terms(event)
    elif path == "/suppliers" and http_method == "GET":
        return _response(200, service.list_suppliers())
    elif path == "/suppliers/match" and http_method == "GET":
        params = event.get("queryStringParameters") or {}
        return _response(200, service.match_supplier(params.get("name", "")))
    else:
        return _response(404, {"error": "Not found", "path": path})


def handle_health():
    """Health check endpoint."""
    return _response(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return _response(
        200,
        {
            "status": "ok",
            "message": "Commission Projection API",
            "version": "1.0",
            "environment": ENVIRONMENT,
            "runtime": "AWS Lambda",
            "endpoints": {
                "projections": "/projections [POST]",
                "projections_summary": "/projections/summary [POST]",
                "validate_payment_terms": "/payment_terms/validate [POST]",
                "suppliers": "/suppliers [GET]",
                "supplier_match": "/suppliers/match?name= [GET]",
                "health": "/health [GET]",
            },
        },
    )


def _parse_body(event):
    """Decode the request body; None when it is empty."""
    body = event.get("body", "")
    if not isinstance(body, str):
        return body
    if not body:
        return None
    # Handle base64 encoded body (API Gateway)
    if event.get("isBase64Encoded"):
        body = base64.b64decode(body).decode("utf-8")
    return json.loads(body)


def handle_projections(event):
    """Project commission payments for one contract or a batch."""
    try:
        input_data = _parse_body(event)
        if not input_data:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        if isinstance(input_data, list):
            input_data = {"contracts": input_data}

        count = len(input_data["contracts"]) if "contracts" in input_data else 1
        logger.info(f"Projecting payments for {count} contract(s)")

        result = service.project(input_data)

        logger.info(f"Projection complete for {count} contract(s)")

        return _response(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected projection error: {str(e)}", exc_info=True)
        return _response(500, {"error": "An unexpected error occurred during projection", "status": "failed"})


def handle_validate_terms(event):
    """Validate supplier payment terms before they are saved."""
    try:
        input_data = _parse_body(event)
        if not input_data:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        return _response(200, service.validate_terms(input_data))

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Payment terms rejected: {str(e)}")
        return _response(400, {"valid": False, "error": str(e), "status": "validation_failed"})


def handle_summary(event):
    """Dashboard figures for a batch of contracts as of a given day."""
    try:
        input_data = _parse_body(event)
        if not input_data:
            return _response(400, {"error": "No input data provided", "status": "failed"})

        return _response(200, service.summarise(input_data))

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return _response(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Validation error: {str(e)}")
        return _response(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})
