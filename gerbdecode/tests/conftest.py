import pytest

from ..state import InterpreterState
from ..apertures import ApertureTable, ApertureDefinition, ApertureShape
from ..step_repeat import StepAndRepeat
from ..rs274d import CommandDispatcher


class Plotter:
    """ Command dispatcher wired up with a small aperture table, recording everything it produces. """

    def __init__(self):
        self.state = InterpreterState()
        self.items = []
        self.metadata = []
        self.apertures = ApertureTable([
            ApertureDefinition(10, ApertureShape.CIRCLE, (0.2, 0.2)),
            ApertureDefinition(11, ApertureShape.RECTANGLE, (1.0, 0.5)),
            ])
        self.step_repeat = StepAndRepeat(self.items)
        self.dispatcher = CommandDispatcher(self.state, self.items, self.apertures,
                step_repeat=self.step_repeat,
                execute_metadata=lambda cid, cmd: self.metadata.append((cid, cmd)))

    @property
    def messages(self):
        return self.dispatcher.messages

    def g(self, code, text=''):
        return self.dispatcher.execute_g_command(code, text)

    def d(self, code, x=None, y=None, i=None, j=None):
        if x is not None or y is not None:
            self.state.update_point(x, y)
        if i is not None or j is not None:
            self.state.set_rel_center(i, j)
        return self.dispatcher.execute_d_command(code)


@pytest.fixture()
def plotter():
    return Plotter()


@pytest.fixture()
def gerber_file(tmp_path):
    def write(content, name='test.gbr'):
        path = tmp_path / name
        path.write_text(content)
        return path
    return write
