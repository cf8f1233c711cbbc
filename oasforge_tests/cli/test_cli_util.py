import pytest

from oasforge.cli.util import LogFormat, LoggingConfig, pop_logging_args


@pytest.mark.parametrize(
    ['argv', 'expected', 'remaining'],
    [
        ([], LoggingConfig(LogFormat.PRETTY, False), []),
        (['--json-logs', 'out.json'], LoggingConfig(LogFormat.JSON, False), ['out.json']),
        (['-m', 'app', '--disable-logs', '--debug'], LoggingConfig(LogFormat.NULL, True), ['-m', 'app']),
    ]
)
def test_pop_logging_args(argv, expected, remaining):
    assert pop_logging_args(argv) == expected
    assert argv == remaining


def test_logging_formats_are_exclusive():
    with pytest.raises(SystemExit):
        pop_logging_args(['--json-logs', '--disable-logs'])
