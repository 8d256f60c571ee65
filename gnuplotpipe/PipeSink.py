# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
import logging

from .Errors import StreamClosed, PipeError


class PipeSink:
    """Ordered append-only byte channel to gnuplot's standard input.

    Wraps any binary writable stream, usually Popen.stdin. Not thread safe, the owning
    session serializes access.
    """
    encoding = 'utf-8'

    def __init__(self, stream):
        self.stream = stream
        self.closed = False
        self.bytesWritten = 0

    def write(self, data):
        if self.closed:
            raise StreamClosed("write to closed gnuplot pipe")
        try:
            written = self.stream.write(data)
        except OSError as e:
            logging.getLogger(__name__).error("Writing {0} bytes to gnuplot pipe failed: {1}".format(len(data), e))
            raise PipeError("Writing to gnuplot pipe failed: {0}".format(e)) from e
        if written is not None and written != len(data):
            # unbuffered pipes may accept only part of the data
            logging.getLogger(__name__).error("Short write to gnuplot pipe: {0} of {1} bytes".format(written, len(data)))
            raise PipeError("Short write to gnuplot pipe: {0} of {1} bytes".format(written, len(data)))
        self.bytesWritten += len(data)

    def writeText(self, text):
        self.write(text.encode(self.encoding))

    def writeLine(self, text):
        self.writeText(text + '\n')

    def flush(self):
        if self.closed:
            raise StreamClosed("flush of closed gnuplot pipe")
        try:
            self.stream.flush()
        except OSError as e:
            logging.getLogger(__name__).error("Flushing gnuplot pipe failed: {0}".format(e))
            raise PipeError("Flushing gnuplot pipe failed: {0}".format(e)) from e

    def close(self):
        """close the underlying stream, signals end of input. Calling close again does nothing."""
        if self.closed:
            return
        self.closed = True
        try:
            self.stream.close()
        except OSError as e:
            logging.getLogger(__name__).error("Closing gnuplot pipe failed: {0}".format(e))
            raise PipeError("Closing gnuplot pipe failed: {0}".format(e)) from e
        logging.getLogger(__name__).debug("gnuplot pipe closed after {0} bytes".format(self.bytesWritten))

    def __enter__(self):
        return self

    def __exit__(self, exittype, value, traceback):
        self.close()
