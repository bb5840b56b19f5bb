import os

import pytest

from rwgpft.misc.options import pftoptions, getpftoptions, FORCE_CUBATURE_ENV


class TestPftOptions(object):

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv(FORCE_CUBATURE_ENV, raising = False)
        op = pftoptions()
        assert op['order'] == 9
        assert op['td_order'] == 6
        assert op['npol'] == 8
        assert op['RelCutoff'] == 3
        assert op['force_cubature'] is False
        assert op['nthreads'] == (os.cpu_count() or 1)

    @pytest.mark.parametrize('value', ['1', 'yes', 'True'])
    def test_force_cubature_from_environment(self, monkeypatch, value):
        monkeypatch.setenv(FORCE_CUBATURE_ENV, value)
        assert pftoptions()['force_cubature'] is True

    @pytest.mark.parametrize('value', ['', '0', 'off'])
    def test_force_cubature_off(self, monkeypatch, value):
        monkeypatch.setenv(FORCE_CUBATURE_ENV, value)
        assert pftoptions()['force_cubature'] is False

    def test_keyword_override(self):
        op = pftoptions(order = 4)
        assert op['order'] == 4
        assert op['td_order'] == 6

    def test_update_existing(self):
        op = pftoptions()
        op2 = pftoptions(op, npol = 3)
        assert op2 is op
        assert op['npol'] == 3


class TestGetPftOptions(object):

    def test_merge_dict_and_pairs(self):
        op = getpftoptions({'order': 5}, 'npol', 4, nthreads = 2)
        assert op['order'] == 5
        assert op['npol'] == 4
        assert op['nthreads'] == 2
        assert op['RelCutoff'] == 3

    def test_none_is_ignored(self):
        op = getpftoptions(None)
        assert op['order'] == 9

    def test_does_not_modify_input(self):
        user = {'order': 3}
        op = getpftoptions(user, td_order = 2)
        assert 'td_order' not in user
        assert op['order'] == 3

    def test_substructure(self):
        op = getpftoptions({'fine': {'order': 12}}, ['fine'])
        assert op['order'] == 12
