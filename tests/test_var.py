"""
Tests for Var, VarSet and Factor.
"""

import numpy as np
import pytest

from daibp.core.errors import DaiError, ErrorKind
from daibp.core.var import Var, VarSet
from daibp.tensor.factor import Factor, dist_linf, kl_dist


class TestVar:
    def test_identity_is_the_label(self):
        assert Var(1, 2) == Var(1, 3)
        assert hash(Var(1, 2)) == hash(Var(1, 3))
        assert Var(1, 2) != Var(2, 2)

    def test_ordering(self):
        assert Var(1, 5) < Var(2, 2)
        assert sorted([Var(3, 2), Var(0, 2), Var(1, 2)]) == [Var(0, 2), Var(1, 2), Var(3, 2)]

    def test_str(self):
        assert str(Var(7, 2)) == "x7"

    def test_states_must_be_positive(self):
        with pytest.raises(ValueError):
            Var(0, 0)


class TestVarSet:
    @pytest.fixture
    def xs(self):
        return [Var(k, k + 2) for k in range(4)]

    def test_canonical_order(self, xs):
        s = VarSet(xs[2], xs[0], xs[1], xs[0])
        assert s.labels() == (0, 1, 2)
        assert s == VarSet(xs[0], xs[1], xs[2])
        assert hash(s) == hash(VarSet(xs[1], xs[2], xs[0]))

    def test_set_operations(self, xs):
        a = VarSet(xs[0], xs[1])
        b = VarSet(xs[1], xs[2])
        assert (a | b).labels() == (0, 1, 2)
        assert (a & b).labels() == (1,)
        assert (a - xs[1]).labels() == (0,)
        assert (a - b).labels() == (0,)
        assert (a | xs[3]).labels() == (0, 1, 3)
        assert (a - xs[3]) == a

    def test_subset_tests(self, xs):
        a = VarSet(xs[0], xs[1])
        b = VarSet(xs[0], xs[1], xs[2])
        assert a <= b
        assert a < b
        assert b >= a
        assert b > a
        assert a <= a
        assert not a < a
        assert not b <= a

    def test_container_protocol(self, xs):
        s = VarSet(xs[3], xs[1])
        assert xs[1] in s
        assert xs[0] not in s
        assert len(s) == 2
        assert list(s) == [xs[1], xs[3]]
        assert s[0] == xs[1]
        assert not VarSet()

    def test_nr_states(self, xs):
        assert VarSet(xs[0], xs[1]).nr_states() == 2 * 3
        assert VarSet().nr_states() == 1


class TestFactor:
    @pytest.fixture
    def f(self):
        a, b = Var(0, 2), Var(1, 3)
        return Factor(VarSet(a, b), np.arange(1.0, 7.0).reshape(2, 3)), a, b

    def test_default_table_is_ones(self):
        f = Factor(Var(0, 3))
        assert np.array_equal(f.p, np.ones(3))

    def test_size_mismatch(self):
        with pytest.raises(ValueError):
            Factor(Var(0, 3), [1.0, 2.0])

    def test_marginal(self, f):
        f, a, b = f
        m = f.marginal(a)
        assert np.allclose(m.p, np.array([6.0, 15.0]) / 21.0)
        assert np.allclose(f.marginal(b, normed=False).p, [5.0, 7.0, 9.0])

    def test_states_of(self, f):
        f, a, b = f
        assert f.states_of(a).tolist() == [0, 0, 0, 1, 1, 1]
        assert f.states_of(b).tolist() == [0, 1, 2, 0, 1, 2]
        with pytest.raises(DaiError):
            f.states_of(Var(5, 2))

    def test_product_aligns_axes(self, f):
        f, a, b = f
        g = Factor(b, [1.0, 0.0, 2.0])
        h = f * g
        assert h.vars == f.vars
        assert np.allclose(h.p, f.p * np.array([1.0, 0.0, 2.0]))
        c = Var(2, 2)
        k = Factor(VarSet(a, c), [[1.0, 2.0], [3.0, 4.0]]) * f
        assert k.vars.labels() == (0, 1, 2)
        assert k.p[1, 2, 0] == pytest.approx(3.0 * 6.0)

    def test_normalize_zero(self):
        with pytest.raises(DaiError) as err:
            Factor(Var(0, 2), [0.0, 0.0]).normalized()
        assert err.value.kind is ErrorKind.NOT_NORMALIZABLE

    def test_entropy(self):
        assert Factor(Var(0, 4), [0.25] * 4).entropy() == pytest.approx(np.log(4))
        assert Factor(Var(0, 2), [1.0, 0.0]).entropy() == 0.0

    def test_distances(self):
        p = Factor(Var(0, 2), [0.5, 0.5])
        q = Factor(Var(0, 2), [0.25, 0.75])
        assert dist_linf(p.p, q.p) == pytest.approx(0.25)
        assert kl_dist(p, q) == pytest.approx(0.5 * np.log(2.0) + 0.5 * np.log(0.5 / 0.75))
        assert kl_dist(p, Factor(Var(0, 2), [1.0, 0.0])) == float("inf")
