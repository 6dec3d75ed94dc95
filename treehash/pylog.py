#!/usr/bin/env python
"""CSV log of the computed tree hashes."""

from datetime import datetime
import atexit
import csv
import logging
import os.path

from treehash.errors import ResultLogError

_logger = logging.getLogger(__name__)

HEADER = ['timestamp', 'name', 'size', 'treehash']


class PyLog:

    def __init__(self, filename='treehash.log', header=HEADER, write_freq=10):
        self.FILE_NAME = filename
        self.WRITE_FREQ = write_freq

        self.batch_data = []

        self.set_header(header)

        # write on file if the application is killed
        atexit.register(self.write_on_file)

    def _get_filename(self):
        return self.FILE_NAME

    def _write_rows(self, mode, rows):
        try:
            with open(self._get_filename(), mode, newline='') as f:
                csv.writer(f, lineterminator='\n').writerows(rows)
        except OSError as e:
            raise ResultLogError('Cannot write %s: %s' % (self._get_filename(), e)) from e

    def set_header(self, header):
        """Write the header line, only if the log file does not exist yet"""
        if os.path.isfile(self._get_filename()):
            return
        self._write_rows('w', [header])

    def write_on_file(self):
        """Write the logged rows on the file"""
        if not self.batch_data:
            return
        rows, self.batch_data = self.batch_data, []
        _logger.debug('Writing %d row(s) to %s', len(rows), self._get_filename())
        self._write_rows('a', rows)

    def log_data(self, data):
        """Log a list of values as one CSV row"""
        self.batch_data.append([str(value) for value in data])
        if len(self.batch_data) >= self.WRITE_FREQ:
            self.write_on_file()

    def log_result(self, name, size, checksum):
        """Log one tree hash, stamped with the current time"""
        datestr = datetime.now().strftime('%Y-%m-%dT%H:%M:%S')
        self.log_data([datestr, name, size, checksum])

    def close(self):
        atexit.unregister(self.write_on_file)
        self.write_on_file()
