"""Tests for the /transaction endpoints."""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest

from tests.helpers import FOOD, SALARY, add_transaction


def _body(**overrides):
    body = {
        "category_id": FOOD,
        "amount": 25.5,
        "type": "expense",
        "transaction_date": "2024-01-15",
        "description": "Lunch",
    }
    body.update(overrides)
    return body


class TestAuthentication:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("post", "/transaction/add"),
            ("put", "/transaction/update"),
            ("delete", "/transaction/delete?id=1"),
            ("get", "/transaction/list"),
            ("get", "/transaction/stats?start_date=2024-01-01&end_date=2024-01-31"),
            ("get", "/transaction/trend_stats?start_date=2024-01-01&end_date=2024-01-31"),
            ("get", "/transaction/export?start_date=2024-01-01&end_date=2024-01-31"),
        ],
    )
    def test_user_id_required(self, client, method, path):
        response = getattr(client, method)(path, json=_body())

        assert response.status_code == 401
        assert response.get_json() == {"error": "未授权访问"}

    def test_non_numeric_user_id(self, client):
        response = client.get("/transaction/list?user_id=abc")

        assert response.status_code == 401

    def test_wrong_method(self, client, user):
        response = client.get(f"/transaction/add?user_id={user.id}")

        assert response.status_code == 405
        assert response.get_json() == {"error": "不支持的请求方法"}


class TestAdd:
    def test_add(self, client, services, user):
        response = client.post(f"/transaction/add?user_id={user.id}", json=_body())

        assert response.status_code == 200
        transaction_id = response.get_json()["transaction_id"]
        found = services.transactions.find(transaction_id, user.id)
        assert found.description == "Lunch"
        assert found.transaction_date == date(2024, 1, 15)

    def test_add_accepts_date_alias(self, client, services, user):
        body = _body()
        body["date"] = body.pop("transaction_date")

        response = client.post(f"/transaction/add?user_id={user.id}", json=body)

        assert response.status_code == 200

    def test_add_then_list(self, client, user):
        client.post(f"/transaction/add?user_id={user.id}", json=_body())

        response = client.get(
            f"/transaction/list?user_id={user.id}"
            "&start_date=2024-01-01&end_date=2024-01-31"
        )

        data = response.get_json()
        assert len(data) == 1
        assert data[0]["amount"] == 25.5
        assert data[0]["category_name"] == "餐饮"
        assert data[0]["category_icon"] == "utensils"

    @pytest.mark.parametrize("missing", ["category_id", "type", "transaction_date"])
    def test_missing_field(self, client, user, missing):
        body = _body()
        del body[missing]

        response = client.post(f"/transaction/add?user_id={user.id}", json=body)

        assert response.status_code == 400
        assert response.get_json() == {"error": "类别、金额、类型和日期不能为空"}

    @pytest.mark.parametrize("amount", [0, -5, "abc"])
    def test_amount_must_be_positive(self, client, user, amount):
        response = client.post(
            f"/transaction/add?user_id={user.id}", json=_body(amount=amount)
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "金额必须为正数"}

    @pytest.mark.parametrize("amount", ["1e400", "1000000000000", "Infinity", "NaN"])
    def test_amount_must_be_finite_and_bounded(self, client, user, amount):
        response = client.post(
            f"/transaction/add?user_id={user.id}", json=_body(amount=amount)
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "金额必须为正数"}
        assert client.get(f"/transaction/list?user_id={user.id}").get_json() == []

    def test_update_rejects_overflowing_amount(self, client, services, user):
        created = add_transaction(services, user.id, date(2024, 1, 5), "10")

        response = client.put(
            f"/transaction/update?user_id={user.id}",
            json=_body(id=created.id, amount="1e400"),
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "金额必须为正数"}
        assert services.transactions.find(created.id, user.id).amount == Decimal("10")

    def test_largest_amount_is_accepted(self, client, user):
        response = client.post(
            f"/transaction/add?user_id={user.id}",
            json=_body(amount="999999999999.99"),
        )

        assert response.status_code == 200

    def test_invalid_type(self, client, user):
        response = client.post(
            f"/transaction/add?user_id={user.id}", json=_body(type="transfer")
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "类型必须为收入或支出"}

    def test_unknown_category(self, client, user):
        response = client.post(
            f"/transaction/add?user_id={user.id}", json=_body(category_id=999)
        )

        assert response.status_code == 400
        assert response.get_json()["error"].startswith("添加交易记录失败")


class TestUpdateAndDelete:
    def test_update(self, client, services, user):
        created = add_transaction(services, user.id, date(2024, 1, 5), "10")

        response = client.put(
            f"/transaction/update?user_id={user.id}",
            json=_body(id=created.id, amount="66.6", type="income", category_id=SALARY),
        )

        assert response.status_code == 200
        assert response.get_json()["success"] is True
        assert services.transactions.find(created.id, user.id).type == "income"

    def test_update_requires_id(self, client, user):
        response = client.put(f"/transaction/update?user_id={user.id}", json=_body())

        assert response.status_code == 400
        assert response.get_json() == {"error": "ID、类别、金额、类型和日期不能为空"}

    def test_update_other_users_record(self, client, services, user, other_user):
        created = add_transaction(services, user.id, date(2024, 1, 5), "10")

        response = client.put(
            f"/transaction/update?user_id={other_user.id}", json=_body(id=created.id)
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "未找到记录或无权限修改"}
        assert services.transactions.find(created.id, user.id).description is None

    def test_delete(self, client, services, user):
        created = add_transaction(services, user.id, date(2024, 1, 5), "10")

        response = client.delete(f"/transaction/delete?user_id={user.id}&id={created.id}")

        assert response.status_code == 200
        assert client.get(f"/transaction/list?user_id={user.id}").get_json() == []

    def test_delete_requires_id(self, client, user):
        response = client.delete(f"/transaction/delete?user_id={user.id}")

        assert response.status_code == 400
        assert response.get_json() == {"error": "交易记录ID不能为空"}

    def test_delete_other_users_record(self, client, services, user, other_user):
        created = add_transaction(services, user.id, date(2024, 1, 5), "10")

        response = client.delete(
            f"/transaction/delete?user_id={other_user.id}&id={created.id}"
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "未找到记录或无权限删除"}
        assert services.transactions.find(created.id, user.id) is not None


class TestList:
    def test_unknown_type_filter_is_ignored(self, client, services, user):
        add_transaction(services, user.id, date(2024, 1, 5), "10")
        add_transaction(services, user.id, date(2024, 1, 6), "20", "income", SALARY)

        response = client.get(f"/transaction/list?user_id={user.id}&type=transfer")

        assert len(response.get_json()) == 2

    def test_type_filter(self, client, services, user):
        add_transaction(services, user.id, date(2024, 1, 5), "10")
        add_transaction(services, user.id, date(2024, 1, 6), "20", "income", SALARY)

        response = client.get(f"/transaction/list?user_id={user.id}&type=income")

        assert [t["type"] for t in response.get_json()] == ["income"]

    def test_malformed_date_filter(self, client, user):
        response = client.get(f"/transaction/list?user_id={user.id}&start_date=jan")

        assert response.status_code == 400
        assert response.get_json() == {"error": "日期格式不正确"}


class TestStatistics:
    def test_stats(self, client, services, user):
        add_transaction(services, user.id, date(2024, 1, 5), "40")
        add_transaction(services, user.id, date(2024, 1, 6), "100", "income", SALARY)

        response = client.get(
            f"/transaction/stats?user_id={user.id}&start_date=2024-01-01&end_date=2024-01-31"
        )

        assert response.get_json() == {"income": 100.0, "expense": 40.0, "balance": 60.0}

    def test_category_stats(self, client, services, user):
        add_transaction(services, user.id, date(2024, 1, 5), "40")

        response = client.get(
            f"/transaction/category_stats?user_id={user.id}"
            "&start_date=2024-01-01&end_date=2024-01-31"
        )

        data = response.get_json()
        assert data["income"] == []
        assert data["expense"] == [
            {"id": FOOD, "category_name": "餐饮", "icon": "utensils", "total": 40.0}
        ]

    def test_trend_stats_daily(self, client, user):
        response = client.get(
            f"/transaction/trend_stats?user_id={user.id}"
            "&start_date=2024-01-01&end_date=2024-01-10"
        )

        data = response.get_json()
        assert response.status_code == 200
        assert data["interval"] == "日"
        assert data["dates"][0] == "01-01"
        assert data["dates"][-1] == "01-10"
        assert data["income"] == [0.0] * 10
        assert data["expense"] == [0.0] * 10

    def test_trend_stats_weekly(self, client, user):
        response = client.get(
            f"/transaction/trend_stats?user_id={user.id}"
            "&start_date=2024-01-01&end_date=2024-03-15"
        )

        data = response.get_json()
        assert data["interval"] == "周"
        assert data["dates"][0] == "第01周"
        assert len(data["dates"]) == len(data["income"]) == len(data["expense"])

    def test_trend_stats_monthly(self, client, user):
        response = client.get(
            f"/transaction/trend_stats?user_id={user.id}"
            "&start_date=2024-01-01&end_date=2024-12-31"
        )

        data = response.get_json()
        assert data["interval"] == "月"
        assert data["dates"] == [f"2024-{m:02d}" for m in range(1, 13)]

    @pytest.mark.parametrize(
        "path", ["/transaction/trend_stats", "/transaction/stats", "/transaction/category_stats"]
    )
    def test_dates_required(self, client, user, path):
        response = client.get(f"{path}?user_id={user.id}&start_date=2024-01-01")

        assert response.status_code == 400
        assert response.get_json() == {"error": "开始日期和结束日期不能为空"}

    @pytest.mark.parametrize(
        "start_date,interval,buckets",
        [("9999-12-20", "日", 12), ("9999-11-01", "周", 9), ("9999-01-01", "月", 12)],
    )
    def test_trend_stats_ending_on_last_date(
        self, client, services, user, start_date, interval, buckets
    ):
        add_transaction(services, user.id, date(9999, 12, 31), "5")

        response = client.get(
            f"/transaction/trend_stats?user_id={user.id}"
            f"&start_date={start_date}&end_date=9999-12-31"
        )

        data = response.get_json()
        assert response.status_code == 200
        assert data["interval"] == interval
        assert len(data["dates"]) == buckets
        assert data["expense"][-1] == 5.0

    def test_trend_stats_bad_date(self, client, user):
        response = client.get(
            f"/transaction/trend_stats?user_id={user.id}"
            "&start_date=2024-02-30&end_date=2024-03-31"
        )

        assert response.status_code == 400
        assert "日期格式不正确" in response.get_json()["error"]


class TestExport:
    def test_export(self, client, services, user):
        add_transaction(services, user.id, date(2024, 1, 5), "10", description="午饭")
        add_transaction(services, user.id, date(2024, 1, 6), "20", "income", SALARY)
        add_transaction(services, user.id, date(2024, 2, 6), "30")

        response = client.get(
            f"/transaction/export?user_id={user.id}"
            "&start_date=2024-01-01&end_date=2024-01-31"
        )

        assert response.status_code == 200
        assert response.mimetype == "text/csv"
        assert (
            'filename="transactions_2024-01-01_to_2024-01-31.csv"'
            in response.headers["Content-Disposition"]
        )

        raw = response.get_data()
        assert raw.startswith(b"\xef\xbb\xbf")

        rows = list(csv.reader(io.StringIO(raw.decode("utf-8-sig"))))
        assert rows[0] == ["日期", "类型", "类别", "金额", "描述"]
        assert len(rows) - 1 == len(
            client.get(
                f"/transaction/list?user_id={user.id}"
                "&start_date=2024-01-01&end_date=2024-01-31"
            ).get_json()
        )

    def test_export_requires_dates(self, client, user):
        response = client.get(f"/transaction/export?user_id={user.id}")

        assert response.status_code == 400
        assert response.get_json() == {"error": "开始日期和结束日期不能为空"}
