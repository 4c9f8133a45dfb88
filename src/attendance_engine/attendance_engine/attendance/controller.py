from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..container import Container
from ..sequencing.work_codes import validate_sequence
from .serializers import breakdown_to_dict, conflict_to_dict, profile_from, record_to_dict, sequence_to_dict, work_date_from

log = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/reconcile", methods=["POST"], endpoint="reconcile_day")
    def reconcile_day():
        try:
            data = request.get_json(silent=True) or {}
            employee_id = str(data.get("employeeId") or "").strip()
            if not employee_id:
                return jsonify({"success": False, "message": "employeeId is required"}), 400
            events = data.get("events") or []
            if not isinstance(events, list):
                return jsonify({"success": False, "message": "events must be a list"}), 400

            result = container.reconciliation_service.reconcile_day(
                employee_id,
                work_date_from(data),
                events,
                profile=profile_from(employee_id, data.get("profile")),
                previous_movement=data.get("previousWorkCode"),
            )
            return jsonify(
                {
                    "success": True,
                    "record": record_to_dict(result.record),
                    "breakdown": breakdown_to_dict(result.breakdown),
                    "conflicts": [conflict_to_dict(c) for c in result.conflicts],
                }
            ), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            log.exception("Reconciliation failed")
            return jsonify({"success": False, "message": "Internal error while reconciling attendance"}), 500

    @app.route("/api/sequence/validate", methods=["POST"], endpoint="validate_sequence")
    def validate_codes():
        try:
            data = request.get_json(silent=True) or {}
            codes = data.get("codes")
            if not isinstance(codes, list):
                return jsonify({"success": False, "message": "codes must be a list"}), 400
            carried = data.get("carriedOver")
            validation = validate_sequence(codes, carried_over=carried)
            return jsonify({"success": True, **sequence_to_dict(validation)}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            log.exception("Sequence validation failed")
            return jsonify({"success": False, "message": "Internal error while validating sequence"}), 500
