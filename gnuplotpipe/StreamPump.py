# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
import codecs
import io
import logging
from threading import Thread


def hasFileno(stream):
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):   # io.UnsupportedOperation is an OSError
        return False
    return True


class StreamPump(Thread):
    """Copy a child process output pipe into a caller supplied stream until EOF.

    gnuplot blocks once its stdout or stderr pipe is full, which in turn blocks our writes to its stdin.
    The pump keeps the pipe drained.
    """
    chunkSize = 4096

    def __init__(self, source, target, name=None, encoding='utf-8'):
        Thread.__init__(self, name=name, daemon=True)
        self.source = source
        self.target = target
        self.text = isinstance(target, io.TextIOBase)
        self.encoding = encoding
        self.bytesPumped = 0

    def run(self):
        logger = logging.getLogger(__name__)
        decoder = codecs.getincrementaldecoder(self.encoding)(errors='replace') if self.text else None
        try:
            while True:
                data = self.source.read1(self.chunkSize) if hasattr(self.source, 'read1') else self.source.read(self.chunkSize)
                if not data:
                    break
                self.bytesPumped += len(data)
                if self.text:
                    self.target.write(decoder.decode(data))
                else:
                    self.target.write(data)
                self.target.flush()
            if self.text:
                tail = decoder.decode(b'', final=True)
                if tail:
                    self.target.write(tail)
                    self.target.flush()
        except (OSError, ValueError) as e:
            logger.error("Pumping gnuplot output {0} stopped: {1}".format(self.name, e))
        finally:
            self.source.close()
        logger.debug("Pump {0} finished after {1} bytes".format(self.name, self.bytesPumped))
