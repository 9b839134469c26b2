import io
import logging

import release_candidate.log as examinee


def test_level_prefix_is_not_coloured_for_non_tty():
    stream = io.StringIO()
    formatter = examinee.LevelColouringFormatter(
        fmt='[%(levelprefix)s] %(message)s',
        stream=stream,
    )
    record = logging.LogRecord('x', logging.WARNING, __file__, 1, 'careful', None, None)

    assert formatter.format(record) == '[WARNING] careful'


def test_colour_level_name():
    formatter = examinee.LevelColouringFormatter(fmt='%(message)s')

    coloured = formatter.colour_level_name('ERROR', logging.ERROR)

    assert coloured.startswith(examinee.Bcolors.BOLD + examinee.Bcolors.RED)
    assert coloured.endswith(examinee.Bcolors.RESET_ALL)
    assert formatter.colour_level_name('CUSTOM', 5) == 'CUSTOM'
