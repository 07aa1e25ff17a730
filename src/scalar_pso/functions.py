import numpy as np

def shifted_square(x: float) -> float:
    return float((x - 1.0) * (x - 1.0))

def square(x: float) -> float:
    return float(x * x)

def rastrigin(x: float) -> float:
    return float(10.0 + x * x - 10.0 * np.cos(2 * np.pi * x))

def ackley(x: float) -> float:
    a, b, c = 20.0, 0.2, 2 * np.pi
    return float(-a * np.exp(-b * abs(x)) - np.exp(np.cos(c * x)) + a + np.e)

def bump(x: float) -> float:
    # Peak of 1 at x = 1; meant for --maximize.
    return float(np.exp(-(x - 1.0) ** 2))

FUNCTIONS = {
    "shifted_square": {"f": shifted_square, "label": "y = (x - 1)^2"},
    "square":         {"f": square,         "label": "y = x^2"},
    "rastrigin":      {"f": rastrigin,      "label": "y = 10 + x^2 - 10 cos(2 pi x)"},
    "ackley":         {"f": ackley,         "label": "y = ackley(x)"},
    "bump":           {"f": bump,           "label": "y = exp(-(x - 1)^2)"},
}

DEFAULT_FUNCTION = "shifted_square"
