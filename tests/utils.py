from plasmafractal.core.displacement import Displacer


class ScriptedRandom:
    """Random source returning fixed values, then `default` forever."""

    def __init__(self, values=(), default=0.5):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


class RecordingWriter:
    def __init__(self):
        self.pixels = []

    def write_pixel(self, x, y, color):
        self.pixels.append((x, y, color))

    def coordinates(self):
        return [(x, y) for x, y, _ in self.pixels]


class ConstantDisplacer(Displacer):
    NAME = "Constant"

    def __init__(self, value):
        self.value = value

    def __call__(self, half_width, half_height, depth, canvas, rng):
        return self.value
