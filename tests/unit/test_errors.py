# tests/unit/test_errors.py
from __future__ import annotations

import pytest

from starphot import errors


def test_hierarchy():
    assert issubclass(errors.CutoutOutOfBounds, errors.ImageReadError)
    assert issubclass(errors.BoxTooSmall, errors.GeometryError)
    assert issubclass(errors.EmptyAnnulus, errors.GeometryError)
    for cls in (errors.NoSourceDetected, errors.NonPositiveFlux, errors.NonFiniteSample):
        assert issubclass(cls, errors.NumericError)
    for name in errors.__all__:
        assert issubclass(getattr(errors, name), errors.StarPhotError)


def test_context_rendering_drops_none():
    e = errors.BoxTooSmall("ring does not fit", outer=25.0, boxdims=40, source=None)
    assert e.context == {"outer": 25.0, "boxdims": 40}
    assert str(e) == "ring does not fit [outer=25.0, boxdims=40]"
    assert str(errors.InputError("plain")) == "plain"


def test_with_context_keeps_existing_keys():
    e = errors.NoSourceDetected("nothing", slice=2)
    out = e.with_context(slice=5, source="a.fits", radius=None)
    assert out is e
    assert e.context == {"slice": 2, "source": "a.fits"}


def test_reraise_with_context():
    with pytest.raises(errors.NonPositiveFlux) as ei:
        try:
            raise errors.NonPositiveFlux("negative", net_flux=-1.0)
        except errors.StarPhotError as e:
            raise e.with_context(radius=3.0)
    assert ei.value.context["radius"] == 3.0
