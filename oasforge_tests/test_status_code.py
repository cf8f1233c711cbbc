import pytest

from oasforge.openapi.status import StatusCode


@pytest.mark.parametrize(['code', 'expected'], [(100, '100'), (200, '200'), (404, '404'), (599, '599')])
def test_exact_code(code, expected):
    status = StatusCode.code(code)
    assert status == expected
    assert not status.is_range


@pytest.mark.parametrize('hundreds', [1, 2, 3, 4, 5])
def test_range(hundreds):
    status = StatusCode.range(hundreds)
    assert status == f'{hundreds}XX'
    assert status.is_range


@pytest.mark.parametrize('code', [0, 99, 600, 1000, -200])
def test_invalid_code(code):
    with pytest.raises(ValueError):
        StatusCode.code(code)


@pytest.mark.parametrize('hundreds', [0, 6, 20, 200])
def test_invalid_range(hundreds):
    with pytest.raises(ValueError):
        StatusCode.range(hundreds)


def test_bool_is_not_a_code():
    with pytest.raises(ValueError):
        StatusCode.code(True)


@pytest.mark.parametrize(['value', 'expected'], [
    (201, '201'),
    ('201', '201'),
    ('4XX', '4XX'),
    ('4xx', '4XX'),
])
def test_parse(value, expected):
    assert StatusCode.parse(value) == expected
    assert isinstance(StatusCode.parse(value), StatusCode)


@pytest.mark.parametrize('value', ['default', '2XXX', '', 'abc', '6XX'])
def test_parse_invalid(value):
    with pytest.raises(ValueError):
        StatusCode.parse(value)


def test_usable_as_plain_dict_key():
    responses = {StatusCode.code(200): 'ok', StatusCode.range(5): 'error'}
    assert responses['200'] == 'ok'
    assert responses['5XX'] == 'error'
