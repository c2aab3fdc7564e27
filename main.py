from flask import Flask, request, jsonify
from flask_cors import CORS
from projection_engine import ScheduleCalculator
from projection_engine.service import ProjectionService
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (dashboard and import pipeline call the API)
CORS(app)

# Assert the 100% payment-split invariant on every calculation when enabled
VALIDATE_PAYMENT_TERMS = os.environ.get("VALIDATE_PAYMENT_TERMS", "false").lower() in ("1", "true", "yes")

# Initialize the projection service
service = ProjectionService(ScheduleCalculator(validate_terms=VALIDATE_PAYMENT_TERMS))


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Commission Projection API",
        "version": "1.0",
        "endpoints": {
            "projections": "/projections [POST]",
            "projections_summary": "/projections/summary [POST]",
            "validate_payment_terms": "/payment_terms/validate [POST]",
            "suppliers": "/suppliers [GET]",
            "supplier_match": "/suppliers/match?name= [GET]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/projections", methods=["POST"])
def projections():
    """
    Project commission payments for one contract or a batch of contracts
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        # A bare JSON array is a batch
        if isinstance(input_data, list):
            input_data = {"contracts": input_data}

        count = len(input_data.get("contracts", [])) if "contracts" in input_data else 1
        logger.info(f"Projecting payments for {count} contract(s)")

        result = service.project(input_data)

        logger.info(f"Projection complete for {count} contract(s)")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": f"Validation error: {str(e)}",
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Projection error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during projection",
            "status": "failed"
        }), 500


@app.route("/projections/summary", methods=["POST"])
def projections_summary():
    """Dashboard figures for a batch of contracts as of a given day"""
    input_data = request.get_json(force=True, silent=True)

    if not input_data:
        return jsonify({"error": "No input data provided", "status": "failed"}), 400

    try:
        return jsonify(service.summarise(input_data)), 200
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": f"Validation error: {str(e)}",
            "status": "validation_failed"
        }), 400


@app.route("/payment_terms/validate", methods=["POST"])
def validate_payment_terms():
    """Validate supplier payment terms before they are saved"""
    input_data = request.get_json(force=True, silent=True)

    if not input_data:
        return jsonify({"error": "No input data provided", "status": "failed"}), 400

    try:
        return jsonify(service.validate_terms(input_data)), 200
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Payment terms rejected: {str(e)}")
        return jsonify({
            "valid": False,
            "error": str(e),
            "status": "validation_failed"
        }), 400


@app.route("/suppliers", methods=["GET"])
def suppliers():
    """Supplier catalogue and payment term presets"""
    return jsonify(service.list_suppliers()), 200


@app.route("/suppliers/match", methods=["GET"])
def supplier_match():
    """Match a free-text supplier name against the catalogue"""
    name = request.args.get("name", "")
    return jsonify(service.match_supplier(name)), 200


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
