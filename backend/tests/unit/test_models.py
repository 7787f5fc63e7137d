"""
数据模型单元测试

每个模块完成后必须运行：pytest tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from conftest import make_image_bytes

from bizdesk.models import (
    CaptureSnapshot,
    DeliveryIntent,
    DeliveryOutcome,
    DeliveryTag,
    ExportJob,
    GoodsReceipt,
    GoodsReceiptItem,
    InventoryItem,
    JobStatus,
    PageFrame,
    Supplier,
    pdf_filename,
)


class TestCaptureSnapshot:
    """截图模型测试"""

    def test_from_bytes_reads_size(self):
        snapshot = CaptureSnapshot.from_bytes(make_image_bytes(320, 1400), lossy=False, scale=2)
        assert (snapshot.width, snapshot.height) == (320, 1400)

        with snapshot.open_image() as img:
            assert img.size == (320, 1400)

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            CaptureSnapshot(width=0, height=10, image_bytes=b"")


class TestPageFrame:

    def test_bounds(self):
        frame = PageFrame(index=2, offset_px=-2400, height_px=600)
        assert frame.top_px == 2400
        assert frame.bottom_px == 3000


class TestFilename:

    @pytest.mark.parametrize(
        "name,expected",
        [("invoice", "invoice.pdf"), ("invoice.pdf", "invoice.pdf"), ("INVOICE.PDF", "INVOICE.PDF")],
    )
    def test_pdf_filename(self, name, expected):
        assert pdf_filename(name) == expected


class TestExportJob:
    """导出任务测试"""

    def _job(self) -> ExportJob:
        return ExportJob(job_id="j1", surface_id="doc", filename="a.pdf", intent=DeliveryIntent.DOWNLOAD)

    def test_lifecycle(self):
        job = self._job()
        assert job.status == JobStatus.QUEUED

        job.mark_running()
        assert job.status == JobStatus.RUNNING
        assert job.started_at is not None

        job.mark_succeeded(DeliveryOutcome(tag=DeliveryTag.DOWNLOADED, filename="a.pdf"))
        assert job.status == JobStatus.SUCCEEDED
        assert job.finished_at is not None

    def test_cancelled(self):
        job = self._job()
        job.mark_succeeded(DeliveryOutcome(tag=DeliveryTag.SHARED_CANCELLED, filename="a.pdf"))
        assert job.status == JobStatus.CANCELLED

    def test_failed(self):
        job = self._job()
        job.mark_failed("boom")
        assert job.status == JobStatus.FAILED
        assert job.errors == ["boom"]


class TestRecords:
    """业务记录测试"""

    def test_insert_payload_drops_server_fields(self):
        item = InventoryItem(id="x", user_id="u", name="Bolt", current_stock=3)
        payload = item.to_insert()

        assert payload == {"name": "Bolt", "unit": "pcs", "current_stock": 3}

    def test_extra_columns_ignored(self):
        supplier = Supplier(name="Acme", rating=5)
        assert not hasattr(supplier, "rating")

    def test_receipt_items_not_inserted(self):
        receipt = GoodsReceipt(
            gr_number="GRN-1",
            supplier_name="Acme",
            receipt_date="2026-10-18",
            items=[GoodsReceiptItem(item_name="Bolt")],
        )
        payload = receipt.to_insert()
        assert "items" not in payload
        assert payload["status"] == "RECEIVED"

    def test_needs_reorder(self):
        assert InventoryItem(name="a", current_stock=5, reorder_level=5).needs_reorder
        assert not InventoryItem(name="b", current_stock=6, reorder_level=5).needs_reorder
        assert not InventoryItem(name="c", current_stock=0).needs_reorder
