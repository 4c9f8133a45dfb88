from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..attendance.serializers import breakdown_from, breakdown_to_dict, day_context_from
from ..container import Container
from ..core.exceptions import ValidationError
from ..policies.employee_type import policy_for
from .service import combine_overtime, compute_overtime

log = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/overtime/compute", methods=["POST"], endpoint="compute_overtime")
    def compute():
        try:
            data = request.get_json(silent=True) or {}
            if "totalHours" not in data:
                return jsonify({"success": False, "message": "totalHours is required"}), 400
            context = day_context_from(data)
            if "isHoliday" not in data and "is_holiday" not in data and container.calendar.is_holiday(context.work_date):
                context = day_context_from({**data, "isHoliday": True})
            breakdown = compute_overtime(
                data["totalHours"],
                context,
                policy_for(context.employee_type),
                data.get("hourlyWage"),
                night_hours=data.get("nightHours", 0.0),
                rates=container.rates,
            )
            return jsonify({"success": True, "breakdown": breakdown_to_dict(breakdown)}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            log.exception("Overtime computation failed")
            return jsonify({"success": False, "message": "Internal error while computing overtime"}), 500

    @app.route("/api/overtime/combine", methods=["POST"], endpoint="combine_overtime")
    def combine():
        try:
            data = request.get_json(silent=True) or {}
            items = data.get("breakdowns")
            if not isinstance(items, list):
                return jsonify({"success": False, "message": "breakdowns must be a list"}), 400
            total = combine_overtime(breakdown_from(item) for item in items)
            return jsonify({"success": True, "breakdown": breakdown_to_dict(total)}), 200
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            log.exception("Combining breakdowns failed")
            return jsonify({"success": False, "message": "Internal error while combining breakdowns"}), 500
