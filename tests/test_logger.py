"""
Unit tests for logging setup.
"""

import io
import json
import logging

from rclone_wrapper.utils.logger import get_logger, setup_logging


class TestSetupLogging:

    def test_plain_text(self):
        stream = io.StringIO()
        setup_logging('INFO', stream=stream)

        get_logger('rclone_wrapper.test').info('mounted gdrive')

        assert 'INFO - mounted gdrive' in stream.getvalue()

    def test_level_filters(self):
        stream = io.StringIO()
        setup_logging('WARNING', stream=stream)

        get_logger('rclone_wrapper.test').info('hidden')

        assert stream.getvalue() == ''

    def test_json_format(self):
        stream = io.StringIO()
        setup_logging('DEBUG', json_format=True, stream=stream)

        get_logger('rclone_wrapper.test').debug('unmounted gdrive')

        record = json.loads(stream.getvalue())
        assert record['message'] == 'unmounted gdrive'
        assert record['levelname'] == 'DEBUG'
        assert record['name'] == 'rclone_wrapper.test'

    def test_setup_replaces_handler(self):
        setup_logging('INFO', stream=io.StringIO())
        setup_logging('INFO', stream=io.StringIO())

        assert len(logging.getLogger('rclone_wrapper').handlers) == 1
