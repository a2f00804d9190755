"""
API tests for bill history, invoice PDF download and export.
"""

from datetime import datetime, timedelta

import pytest

from src.api.dependencies import get_export_use_case
from src.application.use_cases import ExportInvoiceUseCase
from src.config.settings import BillingSettings, ExportSettings, PdfSettings
from src.core.entities.bill import Bill, PaymentStatus
from src.core.entities.customer import Customer
from src.infrastructure.export import LocalExportSink
from src.infrastructure.pdf import Fpdf2InvoiceRenderer


@pytest.fixture
async def saved_bills(data_service, customer, product, make_item) -> list[Bill]:
    base = datetime(2024, 2, 1, 10, 0)
    other = Customer(id="cust-2", name="Ravi Kumar", phone="9123456780").snapshot()
    bills = [
        Bill(bill_number="INV-20240201-AAAAAA", customer=customer.snapshot(),
             items=[make_item(product, quantity=2)], subtotal=200.0, total=200.0,
             payment_status=PaymentStatus.PAID, created_at=base),
        Bill(bill_number="INV-20240202-BBBBBB", customer=other,
             items=[make_item(product, quantity=1)], subtotal=100.0, total=100.0,
             created_at=base + timedelta(days=1)),
    ]
    saved = []
    for bill in bills:
        saved.append((await data_service.create_bill(bill)).entity)
    return saved


@pytest.fixture
def export_dir(tmp_path):
    return tmp_path / "invoices"


@pytest.fixture
def use_export_sink(export_dir, issuer):
    """Route exports to a temp directory with a print command that always fails."""
    from src.api.main import app

    def _override(print_command: list[str]):
        sink = LocalExportSink(ExportSettings(output_dir=export_dir, print_command=print_command))
        use_case = ExportInvoiceUseCase(
            renderer=Fpdf2InvoiceRenderer(PdfSettings(), BillingSettings()),
            sink=sink,
            issuer=issuer,
        )
        app.dependency_overrides[get_export_use_case] = lambda: use_case

    return _override


class TestBillHistory:
    async def test_list_newest_first(self, api_client, saved_bills):
        response = await api_client.get("/api/bills")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [b["bill_number"] for b in data["bills"]] == [
            "INV-20240202-BBBBBB",
            "INV-20240201-AAAAAA",
        ]

    async def test_search_and_status(self, api_client, saved_bills):
        data = (await api_client.get("/api/bills", params={"q": "ravi"})).json()
        assert [b["bill_number"] for b in data["bills"]] == ["INV-20240202-BBBBBB"]

        data = (await api_client.get("/api/bills", params={"status": "paid"})).json()
        assert [b["bill_number"] for b in data["bills"]] == ["INV-20240201-AAAAAA"]

    async def test_invalid_status(self, api_client, saved_bills):
        response = await api_client.get("/api/bills", params={"status": "refunded"})
        assert response.status_code == 422

    async def test_stats(self, api_client, saved_bills):
        data = (await api_client.get("/api/bills/stats")).json()
        assert data == {
            "bill_count": 2,
            "total_revenue": 300.0,
            "average_bill": 150.0,
            "items_sold": 3,
        }

    async def test_get_bill(self, api_client, saved_bills):
        bill_id = saved_bills[0].id
        data = (await api_client.get(f"/api/bills/{bill_id}")).json()
        assert data["id"] == bill_id
        assert data["item_count"] == 2

    async def test_get_unknown_bill(self, api_client):
        response = await api_client.get("/api/bills/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "BILL_NOT_FOUND"
        assert response.json()["message"] == "Bill not found: missing"

    async def test_delete_bill(self, api_client, saved_bills):
        bill_id = saved_bills[0].id

        assert (await api_client.delete(f"/api/bills/{bill_id}")).status_code == 204
        assert (await api_client.get(f"/api/bills/{bill_id}")).status_code == 404
        assert (await api_client.delete(f"/api/bills/{bill_id}")).status_code == 404

        data = (await api_client.get("/api/bills")).json()
        assert [b["bill_number"] for b in data["bills"]] == ["INV-20240202-BBBBBB"]

    async def test_delete_bill_storage_failure(self, api_client, saved_bills, data_service, monkeypatch):
        from src.core.interfaces.data_service import DataServiceResult

        async def reject(bill_id):
            return DataServiceResult.fail("Bill is locked")

        monkeypatch.setattr(data_service, "delete_bill", reject)

        response = await api_client.delete(f"/api/bills/{saved_bills[0].id}")

        assert response.status_code == 502
        assert response.json()["error_code"] == "PERSISTENCE_ERROR"
        assert response.json()["message"] == "Bill is locked"
        assert (await api_client.get("/api/bills")).json()["total"] == 2


class TestInvoicePdf:
    async def test_download_pdf(self, api_client, saved_bills):
        bill = saved_bills[0]

        response = await api_client.get(f"/api/bills/{bill.id}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="Invoice_INV-20240201-AAAAAA_')
        assert disposition.endswith('.pdf"')
        assert response.content.startswith(b"%PDF")

    async def test_bill_without_items_cannot_render(self, api_client, data_service, customer):
        empty = (await data_service.create_bill(
            Bill(bill_number="INV-EMPTY", customer=customer.snapshot())
        )).entity

        response = await api_client.get(f"/api/bills/{empty.id}/pdf")

        assert response.status_code == 422
        assert response.json()["error_code"] == "RENDER_ERROR"


class TestInvoiceExport:
    async def test_export_download(self, api_client, saved_bills, use_export_sink, export_dir):
        use_export_sink(["false"])
        bill = saved_bills[0]

        response = await api_client.post(f"/api/bills/{bill.id}/export")

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "download"
        assert data["fell_back"] is False
        saved = export_dir / data["file_name"]
        assert saved.read_bytes().startswith(b"%PDF")
        assert data["file_size"] == saved.stat().st_size

    async def test_print_falls_back_to_download(self, api_client, saved_bills, use_export_sink, export_dir):
        use_export_sink(["false"])
        bill = saved_bills[1]

        response = await api_client.post(f"/api/bills/{bill.id}/export", params={"mode": "print"})

        assert response.status_code == 200
        data = response.json()
        assert data["requested_mode"] == "print"
        assert data["mode"] == "download"
        assert data["fell_back"] is True
        assert (export_dir / data["file_name"]).exists()

    async def test_both_modes_fail(self, api_client, saved_bills, use_export_sink, export_dir):
        export_dir.parent.mkdir(parents=True, exist_ok=True)
        export_dir.write_text("blocks the export directory")
        use_export_sink(["false"])

        response = await api_client.post(f"/api/bills/{saved_bills[0].id}/export", params={"mode": "print"})

        assert response.status_code == 503
        assert response.json()["error_code"] == "EXPORT_ERROR"

    async def test_unknown_mode(self, api_client, saved_bills, use_export_sink):
        use_export_sink(["true"])
        response = await api_client.post(f"/api/bills/{saved_bills[0].id}/export", params={"mode": "fax"})
        assert response.status_code == 422
