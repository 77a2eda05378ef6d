"""
Tests for the named-table entry points.
"""

import numpy as np
import pytest

from daibp.solver import compute_marginals, elimination_cliques, run_bp


class TestSimpleChain:
    """Test on a simple chain A--B--C."""

    @pytest.fixture
    def chain_model(self):
        var_domains = {"A": 2, "B": 2, "C": 2}

        phi_A = np.array([0.6, 0.4])
        phi_AB = np.array([[0.9, 0.1], [0.2, 0.8]])
        phi_BC = np.array([[0.3, 0.7], [0.5, 0.5]])

        factors = {
            "f_A": (("A",), phi_A),
            "f_AB": (("A", "B"), phi_AB),
            "f_BC": (("B", "C"), phi_BC),
        }

        return var_domains, factors

    @staticmethod
    def joint(factors):
        phi_A = factors["f_A"][1]
        phi_AB = factors["f_AB"][1]
        phi_BC = factors["f_BC"][1]
        return phi_A[:, None, None] * phi_AB[:, :, None] * phi_BC[None, :, :]

    def test_partition_function(self, chain_model):
        var_domains, factors = chain_model
        Z_brute = self.joint(factors).sum()

        result = run_bp(var_domains, factors)

        assert result.converged
        assert np.isclose(np.exp(result.log_z), Z_brute, rtol=1e-6)

    def test_marginals(self, chain_model):
        var_domains, factors = chain_model
        joint = self.joint(factors)
        joint /= joint.sum()

        marginals = compute_marginals(var_domains, factors, updates="PARALL")

        assert np.allclose(marginals["A"], joint.sum(axis=(1, 2)), atol=1e-6)
        assert np.allclose(marginals["B"], joint.sum(axis=(0, 2)), atol=1e-6)
        assert np.allclose(marginals["C"], joint.sum(axis=(0, 1)), atol=1e-6)

    def test_evidence(self, chain_model):
        var_domains, factors = chain_model
        joint = self.joint(factors)[:, :, 1]
        joint /= joint.sum()

        result = run_bp(var_domains, factors, evidence={"C": 1})

        assert np.allclose(result.marginals["C"], [0.0, 1.0])
        assert np.allclose(result.marginals["A"], joint.sum(axis=1), atol=1e-6)
        assert np.allclose(result.marginals["B"], joint.sum(axis=0), atol=1e-6)

    def test_log_domain(self, chain_model):
        var_domains, factors = chain_model
        plain = run_bp(var_domains, factors)
        logd = run_bp(var_domains, factors, logdomain=True)
        for name in var_domains:
            assert np.allclose(plain.marginals[name], logd.marginals[name], atol=1e-8)


class TestLoop:
    def test_non_convergence_is_reported(self):
        var_domains = {"A": 2, "B": 2, "C": 2}
        strong = np.array([[5.0, 0.2], [0.2, 5.0]])
        factors = {
            "a": (("A",), np.array([0.9, 0.1])),
            "ab": (("A", "B"), strong),
            "bc": (("B", "C"), strong),
            "ca": (("C", "A"), strong),
        }
        result = run_bp(var_domains, factors, maxiter=1, tol=1e-12)
        assert result.iterations == 1
        assert not result.converged
        for m in result.marginals.values():
            assert m.sum() == pytest.approx(1.0)


class TestEliminationCliques:
    def test_cycle(self):
        ones = np.ones((2, 2))
        factors = {
            "ab": (("A", "B"), ones),
            "bc": (("B", "C"), ones),
            "cd": (("C", "D"), ones),
            "da": (("D", "A"), ones),
        }
        cliques = elimination_cliques({"A": 2, "B": 2, "C": 2, "D": 2}, factors)
        assert cliques == [("A", "B", "D"), ("B", "C", "D"), ("C", "D"), ("D",)]
