# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
"""
Session with a gnuplot process fed through its standard input.

Usage::

    with GnuplotSession.open() as gp:
        gp.command("set title 'sine'")
        gp.plot1D(numpy.sin(numpy.linspace(0, 10, 200)), 'with lines', inferCoordinates=True)

Every write method sends one complete message (a command line, a plot directive
together with its binary payload, a whole here-document) in a single write. The
message is built and checked before anything is sent, so a framing error leaves
the pipe untouched. gnuplot has no way to resynchronize once its input is malformed.
"""
import itertools
import logging
import subprocess
import time
from enum import Enum

import numpy
from wrapt import synchronized

from .DataFraming import hereDocument
from .Encodings import FloatEncoding
from .Errors import SpawnFailure, InsufficientData, ExcessData
from .PipeSink import PipeSink
from .Preferences import GnuplotPreferences
from .StreamPump import StreamPump, hasFileno
from .iteratortools import flattenRecords, isRecord, first

Framing = Enum('Framing', 'Array Record')

flushComment = b'# fill gnuplot input buffer\n'


def datasetName(name):
    return name[1:] if name.startswith('$') else name


class GnuplotSession(object):
    pumpJoinTimeout = 1.0   # seconds, a persisting gnuplot window may keep the output pipes open

    def __init__(self, sink, process=None, persist=False, preferences=None, pumps=None):
        self.sink = sink
        self.process = process
        self.persist = persist
        self.preferences = preferences if preferences is not None else GnuplotPreferences()
        self.encoding = FloatEncoding(self.preferences.byteorder)
        self.pumps = pumps if pumps is not None else list()
        self.datasetCounter = itertools.count()

    @classmethod
    def open(cls, persist=True, stdout=None, stderr=None, preferences=None):
        """Launch gnuplot and return a session writing to its standard input.

        stdout and stderr default to the streams of this process. Streams with a file
        descriptor are handed to gnuplot directly, any other writable stream is fed by
        a StreamPump thread.
        """
        logger = logging.getLogger(__name__)
        preferences = preferences if preferences is not None else GnuplotPreferences()
        args = [preferences.gnuplotExecutable]
        if persist:
            args.append(preferences.persistArgument)
        stdoutArg, pumpStdout = cls._redirect(stdout)
        stderrArg, pumpStderr = cls._redirect(stderr)
        try:
            process = subprocess.Popen(args, stdin=subprocess.PIPE, stdout=stdoutArg, stderr=stderrArg, bufsize=0)
        except OSError as e:
            logger.error("Unable to launch gnuplot '{0}': {1}".format(' '.join(args), e))
            raise SpawnFailure("Unable to launch gnuplot '{0}': {1}".format(' '.join(args), e)) from e
        pumps = list()
        if pumpStdout:
            pumps.append(StreamPump(process.stdout, stdout, name='gnuplot stdout'))
        if pumpStderr:
            pumps.append(StreamPump(process.stderr, stderr, name='gnuplot stderr'))
        for pump in pumps:
            pump.start()
        logger.info("Started '{0}' with pid {1}".format(' '.join(args), process.pid))
        if preferences.startupDelay > 0:
            time.sleep(preferences.startupDelay)
        return cls(PipeSink(process.stdin), process=process, persist=persist, preferences=preferences, pumps=pumps)

    @staticmethod
    def _redirect(stream):
        """return the Popen argument for an output stream and whether it needs a pump"""
        if stream is None:
            return None, False
        if hasFileno(stream):
            stream.flush()
            return stream, False
        return subprocess.PIPE, True

    @synchronized
    def _send(self, *parts):
        self.sink.write(b''.join(parts))

    @synchronized
    def _sendLine(self, text):
        self.sink.writeLine(text)

    @synchronized
    def _sendText(self, text):
        self.sink.writeText(text)

    # commands

    def command(self, text):
        logging.getLogger(__name__).debug("gnuplot command: {0}".format(text))
        self._sendLine(text)

    def issueCommand(self, text):
        self.command(text)
        return self

    def undefine(self, name):
        self.command('undefine ${0}'.format(datasetName(name)))

    # binary data

    def binaryDirective(self, plotCommand, framing, dimensions, transpose=False, fieldsPerRecord=None, style=''):
        parts = [plotCommand, "'-'", 'binary', self.encoding.endianParameter,
                 '{0}=({1})'.format(framing.name.lower(), ','.join(str(d) for d in dimensions)),
                 'transpose' if transpose else '',
                 "format='{0}'".format('%float' * fieldsPerRecord) if fieldsPerRecord else '',
                 style]
        return ' '.join(part for part in parts if part) + '\n'

    def binarySource(self, fieldsPerRecord, recordsPerBlock, blocksPerFrame=None):
        """data source fragment for a plot command whose payload is sent with writeValues"""
        dimensions = [recordsPerBlock] if blocksPerFrame is None else [recordsPerBlock, blocksPerFrame]
        parts = ["'-'", 'binary', self.encoding.endianParameter,
                 'record=({0})'.format(','.join(str(d) for d in dimensions)),
                 "format='{0}'".format('%float' * fieldsPerRecord)]
        return ' '.join(part for part in parts if part)

    def _payload(self, values):
        if isinstance(values, numpy.ndarray):
            return self.encoding.array(values).ravel()
        return self.encoding.array(list(flattenRecords(values)))

    def plot1D(self, values, style='with lines', inferCoordinates=False, fieldsPerRecord=None):
        """Plot values sent as binary data.

        With inferCoordinates gnuplot uses the index as x and values are the y values (array framing).
        Otherwise values are records of fieldsPerRecord floats (default 2, x and y), flat or as rows.
        """
        fields = fieldsPerRecord if fieldsPerRecord else (1 if inferCoordinates else 2)
        payload = self._payload(values)
        count, remainder = divmod(len(payload), fields)
        if remainder:
            raise ExcessData("Excess data: {0} values do not form complete records of {1} fields".format(
                len(payload), fields))
        framing = Framing.Array if inferCoordinates else Framing.Record
        directive = self.binaryDirective('plot', framing, (count,), fieldsPerRecord=fieldsPerRecord, style=style)
        logging.getLogger(__name__).debug("gnuplot binary plot: {0} with {1} bytes".format(directive.rstrip(), payload.nbytes))
        self._send(directive.encode(self.sink.encoding), payload.tobytes())

    def plotGrid(self, values, width, height, style='with lines', inferCoordinates=False, fieldsPerRecord=None):
        """Surface plot of width x height points sent as binary data, values in row major order (y fastest).

        With inferCoordinates values are the z values and gnuplot uses the indices as x and y,
        otherwise values are records of fieldsPerRecord floats (default 3, x, y and z).
        """
        fields = fieldsPerRecord if fieldsPerRecord else (1 if inferCoordinates else 3)
        payload = self._payload(values)
        expected = width * height * fields
        if len(payload) < expected:
            raise InsufficientData("Insufficient data: {0} values for a {1}x{2} grid of {3} fields".format(
                len(payload), width, height, fields))
        if len(payload) > expected:
            raise ExcessData("Excess data: {0} values for a {1}x{2} grid of {3} fields".format(
                len(payload), width, height, fields))
        if inferCoordinates:
            directive = self.binaryDirective('splot', Framing.Array, (width, height), transpose=True,
                                             fieldsPerRecord=fieldsPerRecord, style=style)
        else:
            directive = self.binaryDirective('splot', Framing.Record, (height, width),
                                             fieldsPerRecord=fieldsPerRecord, style=style)
        logging.getLogger(__name__).debug("gnuplot binary splot: {0} with {1} bytes".format(directive.rstrip(), payload.nbytes))
        self._send(directive.encode(self.sink.encoding), payload.tobytes())

    def writeValues(self, values):
        self._send(self._payload(values).tobytes())

    def writeFloat(self, value):
        self._send(self.encoding.encodeFloat(value))

    # named datasets

    def uniqueDatasetName(self):
        return 'data{0}'.format(next(self.datasetCounter))

    def defineDataset(self, name, values, fieldsPerRecord, recordsPerBlock=None, blocksPerFrame=None, framesTotal=None):
        text = hereDocument(datasetName(name), values, fieldsPerRecord, recordsPerBlock, blocksPerFrame, framesTotal)
        logging.getLogger(__name__).debug("gnuplot dataset ${0}: {1} bytes".format(datasetName(name), len(text)))
        self._sendText(text)

    def heredoc(self, values, fieldsPerRecord=None, recordsPerBlock=None, blocksPerFrame=None, framesTotal=None):
        """Define a dataset under a new unique name and return the reference ('$data0') to use in commands.

        fieldsPerRecord defaults to the length of the first row, or 1 for plain numbers.
        """
        if not isinstance(values, numpy.ndarray):
            values = list(values)
        if fieldsPerRecord is None:
            item = first(values)
            fieldsPerRecord = len(item) if isRecord(item) else 1
        name = self.uniqueDatasetName()
        self.defineDataset(name, values, fieldsPerRecord, recordsPerBlock, blocksPerFrame, framesTotal)
        return '$' + name

    # stream and process lifecycle

    @synchronized
    def flush(self):
        """Make gnuplot act on everything sent so far without closing the session, e.g. for animations.

        gnuplot only reads its input once its buffer fills, so the pipe is padded with comment lines.
        """
        self.sink.write(flushComment * self.preferences.flushPadding)
        self.sink.flush()

    def close(self):
        """signal end of input to gnuplot. Does not wait for the process, see waitFor."""
        if self.sink.closed:
            return
        self.sink.close()
        logging.getLogger(__name__).info("gnuplot session closed")

    @property
    def closed(self):
        return self.sink.closed

    @property
    def running(self):
        return self.process is not None and self.process.poll() is None

    def waitFor(self, timeout=None):
        """Wait for gnuplot to exit and return its exit status.

        Returns None if timeout (seconds) elapses first, the process keeps running.
        Sessions without a process return None immediately.
        """
        logger = logging.getLogger(__name__)
        if self.process is None:
            return None
        try:
            returncode = self.process.wait(timeout)
        except subprocess.TimeoutExpired:
            logger.debug("gnuplot pid {0} still running after {1} s".format(self.process.pid, timeout))
            return None
        for pump in self.pumps:
            pump.join(self.pumpJoinTimeout)
        logger.info("gnuplot pid {0} exited with status {1}".format(self.process.pid, returncode))
        return returncode

    def __enter__(self):
        return self

    def __exit__(self, exittype, value, traceback):
        self.close()
        self.waitFor()
