import numpy as np

from glyphnet.core.activations import shifted_tanh, shifted_tanh_deriv_from_output


def test_shifted_tanh_range_and_midpoint():
    x = np.array([-5.0, -1.0, 0.0, 1.0, 5.0])
    y = shifted_tanh(x)
    assert y[2] == 0.5
    assert np.all((y > 0.0) & (y < 1.0))
    assert np.all(np.diff(y) > 0)


def test_shifted_tanh_in_place():
    x = np.array([0.3, -0.7])
    expected = 0.5 * (np.tanh(x) + 1.0)
    out = shifted_tanh(x, out=x)
    assert out is x
    np.testing.assert_allclose(x, expected, rtol=0, atol=1e-15)


def test_derivative_from_output_matches_numeric_slope():
    x = np.linspace(-2.0, 2.0, 9)
    h = 1e-6
    numeric = (shifted_tanh(x + h) - shifted_tanh(x - h)) / (2 * h)
    analytic = shifted_tanh_deriv_from_output(shifted_tanh(x))
    np.testing.assert_allclose(analytic, numeric, rtol=1e-6, atol=1e-9)
