"""
Compositing engine against a recording backend.

Expected values are written out with the same arithmetic the engine is
required to perform, so float results compare exactly.
"""
from __future__ import annotations

import asyncio
import unittest

from signature.exceptions.errors import (
    DocumentLoadError,
    ImageDecodeError,
    InvalidPageIndex,
    SerializationError,
)
from signature.logic.compositing_engine import CompositingEngine
from signature.models.compositing_settings import CompositingSettings
from signature.models.signature_enums import ImageFormat
from signature.models.signature_placement import SignatureImage, SignaturePlacement
from signature.models.text_annotation import TextAnnotation
from signature.models.viewport_frame import ViewportFrame
from signature.tests.recording_backend import RecordingBackend

PDF = b"%PDF-1.7 fake"


def _annotation(id_: str, *, x: float = 100, y: float = 200, page: int = 0,
                size: float = 12, family: str = "Helvetica", text: str = "hello") -> TextAnnotation:
    return TextAnnotation(id=id_, text=text, x=x, y=y, page_index=page,
                          font_size=size, font_family=family)


def _signature(x: float = 50, y: float = 50) -> SignaturePlacement:
    return SignaturePlacement(image=SignatureImage(b"png-bytes", ImageFormat.PNG), x=x, y=y)


class EngineTestCase(unittest.TestCase):
    page_sizes = ((612.0, 792.0),)
    image_size = (400, 100)

    def setUp(self) -> None:
        self.backend = RecordingBackend(self.page_sizes, image_size=self.image_size)
        self.engine = CompositingEngine(backend_factory=lambda: self.backend)

    def compose(self, signature=None, annotations=(), *, ref: int = 0,
                viewport=ViewportFrame(306, 396), name: str = "contract.PDF"):
        return self.engine.compose(PDF, signature, annotations,
                                   reference_page_index=ref, viewport=viewport,
                                   output_name_hint=name)


class TestTextPlacement(EngineTestCase):
    def test_baseline_uses_font_metrics_for_two_fonts(self) -> None:
        self.compose(annotations=[
            _annotation("a", x=100, y=200, size=12, family="Helvetica"),
            _annotation("b", x=10.5, y=33, size=24, family="Courier"),
        ])
        first, second = self.backend.texts()

        h_helv = (718.0 - -207.0) / 1000.0 * 12
        self.assertEqual(first.args["x"], (100 + 8) * 2.0)
        self.assertEqual(first.args["y"], 792 - (200 + 4) * 2.0 - h_helv)

        h_cour = (629.0 - -157.0) / 1000.0 * 24
        self.assertEqual(second.args["x"], (10.5 + 8) * 2.0)
        self.assertEqual(second.args["y"], 792 - (33 + 4) * 2.0 - h_cour)
        self.assertNotEqual(h_helv / 12, h_cour / 24)

    def test_font_size_is_not_rescaled_and_fill_is_black(self) -> None:
        self.compose(annotations=[_annotation("a", size=18)])
        call = self.backend.texts()[0]
        self.assertEqual(call.args["size"], 18)
        self.assertEqual(call.args["color"], (0.0, 0.0, 0.0))
        self.assertEqual(call.args["text"], "hello")

    def test_unknown_family_renders_with_helvetica(self) -> None:
        self.compose(annotations=[_annotation("a", family="Arial")])
        call = self.backend.texts()[0]
        self.assertEqual(call.args["font"].family, "Helvetica")
        self.assertEqual(self.backend.font_embeds, ["Helvetica"])

    def test_fonts_are_embedded_once_per_family(self) -> None:
        self.compose(annotations=[
            _annotation("a", family="Times-Roman"),
            _annotation("b", family="Times-Roman"),
            _annotation("c", family="Courier"),
        ])
        self.assertEqual(self.backend.font_embeds, ["Times-Roman", "Courier"])
        a, b, _ = self.backend.texts()
        self.assertIs(a.args["font"], b.args["font"])

    def test_custom_padding(self) -> None:
        engine = CompositingEngine(backend_factory=lambda: self.backend,
                                   settings=CompositingSettings(padding_top=0, padding_left=0))
        engine.compose(PDF, None, [_annotation("a", x=10, y=10)], reference_page_index=0,
                       viewport=ViewportFrame(612, 792), output_name_hint="x.pdf")
        call = self.backend.texts()[0]
        self.assertEqual(call.args["x"], 10 * 1.0)
        self.assertEqual(call.args["y"], 792 - 10 * 1.0 - (718.0 - -207.0) / 1000.0 * 12)


class TestMultiPageBinding(EngineTestCase):
    page_sizes = ((612.0, 792.0), (595.0, 842.0), (612.0, 792.0))

    def test_annotations_land_on_their_own_pages(self) -> None:
        self.compose(
            annotations=[_annotation("p0", page=0, y=100), _annotation("p2", page=2, y=300)],
            ref=1, viewport=ViewportFrame(297.5, 421),
        )
        calls = self.backend.texts()
        self.assertEqual([c.page_index for c in calls], [0, 2])

        h = (718.0 - -207.0) / 1000.0 * 12
        # scale and flip come from the reference page (595x842), not from pages 0/2
        self.assertEqual(calls[0].args["y"], 842 - (100 + 4) * 2.0 - h)
        self.assertEqual(calls[1].args["y"], 842 - (300 + 4) * 2.0 - h)
        self.assertEqual(calls[1].args["x"], (100 + 8) * 2.0)

    def test_signature_goes_to_reference_page_only(self) -> None:
        self.compose(_signature(), [_annotation("p0", page=0)], ref=1,
                     viewport=ViewportFrame(297.5, 421))
        images = self.backend.images()
        self.assertEqual(len(images), 1)
        self.assertEqual(images[0].page_index, 1)


class TestSignaturePlacement(EngineTestCase):
    def test_wide_signature_is_clamped_then_scaled(self) -> None:
        self.compose(_signature(50, 50))
        call = self.backend.images()[0]
        # 400x100 -> 200x50, scale 2
        self.assertEqual(call.args["x"], 50 * 2.0)
        self.assertEqual(call.args["y"], 792 - 50 * 2.0 - 50.0 * 2.0)
        self.assertEqual(call.args["width"], 200.0 * 2.0)
        self.assertEqual(call.args["height"], 50.0 * 2.0)
        self.assertEqual(self.backend.image_embeds, [(b"png-bytes", "PNG")])

    def test_signature_drawn_after_text(self) -> None:
        self.compose(_signature(), [_annotation("a")])
        self.assertEqual([c.kind for c in self.backend.calls], ["text", "image"])

    def test_anisotropic_scale(self) -> None:
        self.compose(_signature(10, 20), viewport=ViewportFrame(612, 396))
        call = self.backend.images()[0]
        self.assertEqual(call.args["x"], 10 * 1.0)
        self.assertEqual(call.args["y"], 792 - 20 * 2.0 - 50.0 * 2.0)
        self.assertEqual((call.args["width"], call.args["height"]), (200.0, 100.0))


class TestTallSignature(EngineTestCase):
    image_size = (150, 300)

    def test_tall_signature_is_clamped_by_height(self) -> None:
        self.compose(_signature(0, 0), viewport=ViewportFrame(612, 792))
        call = self.backend.images()[0]
        self.assertEqual((call.args["width"], call.args["height"]), (50.0, 100.0))
        self.assertEqual(call.args["y"], 792 - 0 * 1.0 - 100.0 * 1.0)


class TestResultAndErrors(EngineTestCase):
    def test_result_carries_bytes_and_derived_name(self) -> None:
        result = self.compose(annotations=[_annotation("a")], name="contract.PDF")
        self.assertEqual(result.data, b"%PDF-recorded")
        self.assertEqual(result.file_name, "contract-signed.pdf")

    def test_reference_page_out_of_range(self) -> None:
        for ref in (1, -1):
            with self.subTest(ref=ref):
                with self.assertRaises(InvalidPageIndex):
                    self.compose(annotations=[_annotation("a")], ref=ref)
        self.assertEqual(self.backend.calls, [])

    def test_annotation_page_out_of_range_draws_nothing(self) -> None:
        with self.assertRaises(InvalidPageIndex) as ctx:
            self.compose(annotations=[_annotation("a"), _annotation("b", page=3)])
        self.assertEqual(ctx.exception.page_index, 3)
        self.assertIsInstance(ctx.exception, IndexError)
        self.assertEqual(self.backend.calls, [])

    def test_open_failure_is_document_load_error(self) -> None:
        self.backend.fail_on = "open"
        with self.assertRaises(DocumentLoadError):
            self.compose(annotations=[_annotation("a")])

    def test_backend_load_error_passes_through(self) -> None:
        engine = CompositingEngine(backend_factory=lambda: self.backend)
        with self.assertRaises(DocumentLoadError):
            engine.compose(b"garbage", None, [_annotation("a")], reference_page_index=0,
                           viewport=ViewportFrame(1, 1), output_name_hint="x")

    def test_image_failure_is_image_decode_error(self) -> None:
        self.backend.fail_on = "image"
        with self.assertRaises(ImageDecodeError):
            self.compose(_signature())

    def test_serialize_failure_is_serialization_error(self) -> None:
        self.backend.fail_on = "serialize"
        with self.assertRaises(SerializationError):
            self.compose(annotations=[_annotation("a")])

    def test_compose_async(self) -> None:
        result = asyncio.run(self.engine.compose_async(
            PDF, _signature(), [_annotation("a")],
            reference_page_index=0, viewport=ViewportFrame(306, 396),
            output_name_hint="report",
        ))
        self.assertEqual(result.file_name, "report-signed.pdf")
        self.assertEqual(len(self.backend.calls), 2)


if __name__ == "__main__":
    unittest.main()
