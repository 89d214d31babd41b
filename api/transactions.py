"""Transaction endpoints: CRUD, statistics and CSV export.

Every route identifies the caller by the ``user_id`` query parameter.
"""

from flask import Blueprint, Response, jsonify, request
from api.context import current_user_id, get_services
from api.schemas import (
    DateRangeQuery,
    ExportQuery,
    TransactionIdQuery,
    TransactionQuery,
    TransactionRequest,
    TransactionUpdateRequest,
    parse_payload,
)

bp = Blueprint("transactions", __name__, url_prefix="/transaction")


@bp.route("/add", methods=["POST"])
def add_transaction():
    user_id = current_user_id()
    payload = parse_payload(TransactionRequest, request.get_json(silent=True))

    transaction = get_services().transactions.create(
        user_id=user_id,
        category_id=payload.category_id,
        amount=payload.amount,
        type=payload.type,
        transaction_date=payload.transaction_date,
        description=payload.description,
    )
    return jsonify({"message": "添加成功", "transaction_id": transaction.id})


@bp.route("/update", methods=["PUT"])
def update_transaction():
    user_id = current_user_id()
    payload = parse_payload(TransactionUpdateRequest, request.get_json(silent=True))

    get_services().transactions.update(
        transaction_id=payload.id,
        user_id=user_id,
        category_id=payload.category_id,
        amount=payload.amount,
        type=payload.type,
        transaction_date=payload.transaction_date,
        description=payload.description,
    )
    return jsonify({"message": "更新成功", "success": True})


@bp.route("/delete", methods=["DELETE"])
def delete_transaction():
    user_id = current_user_id()
    query = parse_payload(TransactionIdQuery, request.args.to_dict())

    get_services().transactions.delete(query.id, user_id)
    return jsonify({"message": "删除成功", "success": True})


@bp.route("/list", methods=["GET"])
def list_transactions():
    user_id = current_user_id()
    query = parse_payload(TransactionQuery, request.args.to_dict())

    transactions = get_services().transactions.find_by_user(
        user_id, query.to_filters()
    )
    return jsonify([t.to_dict() for t in transactions])


@bp.route("/stats", methods=["GET"])
def stats():
    user_id = current_user_id()
    query = parse_payload(DateRangeQuery, request.args.to_dict())

    totals = get_services().statistics.totals(
        user_id, query.start_date, query.end_date
    )
    return jsonify(totals.to_dict())


@bp.route("/category_stats", methods=["GET"])
def category_stats():
    user_id = current_user_id()
    query = parse_payload(DateRangeQuery, request.args.to_dict())

    breakdown = get_services().statistics.category_breakdown(
        user_id, query.start_date, query.end_date
    )
    return jsonify(breakdown.to_dict())


@bp.route("/trend_stats", methods=["GET"])
def trend_stats():
    user_id = current_user_id()
    query = parse_payload(DateRangeQuery, request.args.to_dict())

    series = get_services().statistics.trend(user_id, query.start_date, query.end_date)
    return jsonify(series.to_dict())


@bp.route("/export", methods=["GET"])
def export():
    user_id = current_user_id()
    query = parse_payload(ExportQuery, request.args.to_dict())
    filters = query.to_filters()

    exports = get_services().exports
    body = exports.export_csv(user_id, filters)

    return Response(
        body,
        mimetype="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{exports.filename(filters)}"'
        },
    )
