import json
import os
from random import choices
from string import ascii_letters

from pytest import fixture


@fixture
def workdir(tmp_path):
    """
    Runs the test inside a temporary directory, so no files get written to the source tree.
    """
    startdir = os.getcwd()
    os.chdir(tmp_path)
    #####
    yield tmp_path
    #####
    os.chdir(startdir)


@fixture
def write_json(workdir):
    def write(name: str, data) -> str:
        path = os.path.join(workdir, name)
        with open(path, 'w') as stream:
            stream.write(json.dumps(data))
        return path
    return write


@fixture
def randstr():
    return ''.join(choices(ascii_letters, k = 20))
