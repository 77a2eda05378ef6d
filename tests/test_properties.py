"""
Tests for property sets, BP configuration and error kinds.
"""

import pytest

from daibp.core.errors import DaiError, ErrorKind, error_description
from daibp.core.properties import BPProperties, PropertySet, UpdateType


BASE = {"tol": 1e-9, "maxiter": 100, "logdomain": False, "updates": "PARALL"}


def with_(**kw):
    opts = dict(BASE)
    opts.update(kw)
    return opts


class TestPropertySet:
    def test_parse(self):
        ps = PropertySet.parse("[tol=1e-9, maxiter=100,updates=SEQFIX]")
        assert ps == {"tol": "1e-9", "maxiter": "100", "updates": "SEQFIX"}

    def test_parse_without_brackets(self):
        assert PropertySet.parse("a=1") == {"a": "1"}
        assert PropertySet.parse("[]") == {}

    @pytest.mark.parametrize("text", ["[tol]", "[tol=1", "[=3]"])
    def test_parse_malformed(self, text):
        with pytest.raises(DaiError) as err:
            PropertySet.parse(text)
        assert err.value.kind is ErrorKind.MALFORMED_PROPERTY

    def test_str(self):
        ps = PropertySet()
        ps["maxiter"] = 10
        ps["logdomain"] = True
        ps["updates"] = UpdateType.SEQRND
        assert str(ps) == "[maxiter=10,logdomain=1,updates=SEQRND]"


class TestBPProperties:
    def test_typed_values(self):
        p = BPProperties.from_options(BASE)
        assert p.tol == 1e-9
        assert p.maxiter == 100
        assert p.logdomain is False
        assert p.updates is UpdateType.PARALL
        assert p.verbose == 0
        assert p.damping == 0.0
        assert p.seed is None

    def test_string_values(self):
        p = BPProperties.from_options("[tol=1e-6,maxiter=20,logdomain=1,updates=seqmax,damping=0.25,verbose=2]")
        assert p.tol == 1e-6
        assert p.maxiter == 20
        assert p.logdomain is True
        assert p.updates is UpdateType.SEQMAX
        assert p.damping == 0.25
        assert p.verbose == 2

    def test_round_trip(self):
        p = BPProperties.from_options(with_(damping=0.1, seed=3))
        assert BPProperties.from_options(p.to_property_set()) == p
        assert BPProperties.from_options(str(p.to_property_set())) == p

    @pytest.mark.parametrize("missing", ["tol", "maxiter", "logdomain", "updates"])
    def test_missing_mandatory(self, missing):
        opts = dict(BASE)
        del opts[missing]
        with pytest.raises(DaiError) as err:
            BPProperties.from_options(opts)
        assert err.value.kind is ErrorKind.NOT_ALL_PROPERTIES_SPECIFIED

    def test_unknown_key(self):
        with pytest.raises(DaiError) as err:
            BPProperties.from_options(with_(inference="fast"))
        assert err.value.kind is ErrorKind.UNKNOWN_PROPERTY_TYPE

    def test_unknown_enum(self):
        with pytest.raises(DaiError) as err:
            BPProperties.from_options(with_(updates="SEQALL"))
        assert err.value.kind is ErrorKind.UNKNOWN_ENUM_VALUE

    @pytest.mark.parametrize("key,value", [
        ("tol", "small"),
        ("tol", -1.0),
        ("tol", "nan"),
        ("tol", float("inf")),
        ("maxiter", 2.5),
        ("maxiter", -3),
        ("logdomain", "maybe"),
        ("damping", 1.0),
        ("damping", -0.1),
        ("verbose", True),
    ])
    def test_malformed_values(self, key, value):
        with pytest.raises(DaiError) as err:
            BPProperties.from_options(with_(**{key: value}))
        assert err.value.kind is ErrorKind.MALFORMED_PROPERTY


class TestErrors:
    def test_every_kind_has_a_description(self):
        texts = [error_description(k) for k in ErrorKind]
        assert all(texts)
        assert len(set(texts)) == len(texts)

    def test_message_and_kind(self):
        err = DaiError(ErrorKind.NOT_NORMALIZABLE, "x3")
        assert err.kind is ErrorKind.NOT_NORMALIZABLE
        assert str(err) == "Quantity not normalizable: x3"
        assert str(DaiError(ErrorKind.INTERNAL_ERROR)) == "Internal error"
