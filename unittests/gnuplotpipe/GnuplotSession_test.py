# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
import io
import struct
import unittest

import numpy

from gnuplotpipe.Errors import InsufficientData, ExcessData, StreamClosed
from gnuplotpipe.GnuplotSession import GnuplotSession
from gnuplotpipe.PipeSink import PipeSink
from gnuplotpipe.Preferences import GnuplotPreferences
from gnuplotpipe.iteratortools import coordinateGrid


class RecordingStream(io.BytesIO):
    def __init__(self):
        super().__init__()
        self.content = None
        self.flushCount = 0

    def flush(self):
        self.flushCount += 1
        super().flush()

    def close(self):
        if not self.closed:
            self.content = self.getvalue()
        super().close()


class LatinSink(PipeSink):
    encoding = 'latin-1'

    def __init__(self, stream):
        super().__init__(stream)
        self.lines = list()

    def writeLine(self, text):
        self.lines.append(text)
        super().writeLine(text)


def floats(*values, byteorder='='):
    return struct.pack(byteorder + 'f' * len(values), *values)


class GnuplotSessionTest(unittest.TestCase):
    def setUp(self):
        self.stream = RecordingStream()
        self.gp = GnuplotSession(PipeSink(self.stream))

    def written(self):
        return self.stream.getvalue() if not self.stream.closed else self.stream.content

    def testCommandAndPlot(self):
        self.gp.command("set title 'x'")
        self.gp.plot1D([1.0, 2.0, 3.0], "with lines", True)
        self.assertEqual(self.written(), b"set title 'x'\n" +
                         b"plot '-' binary array=(3) with lines\n" +
                         floats(1.0, 2.0, 3.0))

    def testIssueCommandChaining(self):
        result = self.gp.issueCommand('set grid').issueCommand('unset key')
        self.assertIs(result, self.gp)
        self.assertEqual(self.written(), b'set grid\nunset key\n')

    def testTextGoesThroughSink(self):
        sink = LatinSink(self.stream)
        gp = GnuplotSession(sink)
        gp.command("set xlabel '\u00b5s'")
        gp.defineDataset('t', [0.5], 1)
        self.assertEqual(self.written(), b"set xlabel '\xb5s'\n$t << EOD\n0.5\n\nEOD\n")
        self.assertEqual(sink.lines, ["set xlabel '\u00b5s'"])
        self.assertEqual(sink.bytesWritten, len(self.written()))

    def testPlotRecords(self):
        self.gp.plot1D([(0, 1.5), (1, 2.5)], 'with points')
        self.assertEqual(self.written(), b"plot '-' binary record=(2) with points\n" + floats(0, 1.5, 1, 2.5))

    def testPlotNumpyRecords(self):
        data = numpy.array([[0.0, 1.0], [1.0, 0.5], [2.0, 0.25]])
        self.gp.plot1D(data, '')
        self.assertEqual(self.written(), b"plot '-' binary record=(3)\n" + floats(0.0, 1.0, 1.0, 0.5, 2.0, 0.25))

    def testPlotExplicitFields(self):
        self.gp.plot1D(range(6), 'with yerrorbars', fieldsPerRecord=3)
        self.assertEqual(self.written(), b"plot '-' binary record=(2) format='%float%float%float' with yerrorbars\n" +
                         floats(0, 1, 2, 3, 4, 5))

    def testPlotIncompleteRecord(self):
        with self.assertRaises(ExcessData):
            self.gp.plot1D([1.0, 2.0, 3.0], 'with lines')
        self.assertEqual(self.written(), b'')

    def testPlotGenerator(self):
        self.gp.plot1D((x * 0.5 for x in range(4)), 'with lines', inferCoordinates=True)
        self.assertEqual(self.written(), b"plot '-' binary array=(4) with lines\n" + floats(0.0, 0.5, 1.0, 1.5))

    def testGridArray(self):
        self.gp.plotGrid(range(6), 3, 2, 'with pm3d', inferCoordinates=True)
        self.assertEqual(self.written(), b"splot '-' binary array=(3,2) transpose with pm3d\n" + floats(*range(6)))

    def testGridRecords(self):
        values = [(x, y, x + 10 * y) for x, y in coordinateGrid(3, 2)]
        self.gp.plotGrid(values, 3, 2)
        expected = b''.join(floats(*v) for v in values)
        self.assertEqual(self.written(), b"splot '-' binary record=(2,3) with lines\n" + expected)
        self.assertEqual(len(expected), 3 * 2 * 3 * 4)

    def testGridMismatch(self):
        with self.assertRaises(InsufficientData):
            self.gp.plotGrid(range(5), 3, 2, inferCoordinates=True)
        with self.assertRaises(ExcessData):
            self.gp.plotGrid(range(7), 3, 2, inferCoordinates=True)
        with self.assertRaises(InsufficientData):
            self.gp.plotGrid(range(6), 3, 2)
        self.assertEqual(self.written(), b'')

    def testBigEndian(self):
        preferences = GnuplotPreferences()
        preferences.byteorder = 'big'
        gp = GnuplotSession(PipeSink(self.stream), preferences=preferences)
        gp.plot1D([1.0, 2.0], 'with lines', inferCoordinates=True)
        gp.plotGrid([1.0, 2.0], 1, 2, 'with lines', inferCoordinates=True)
        self.assertEqual(self.written(),
                         b"plot '-' binary endian=big array=(2) with lines\n" + floats(1.0, 2.0, byteorder='>') +
                         b"splot '-' binary endian=big array=(1,2) transpose with lines\n" + floats(1.0, 2.0, byteorder='>'))

    def testBinarySource(self):
        self.assertEqual(self.gp.binarySource(1, 50), "'-' binary record=(50) format='%float'")
        self.assertEqual(self.gp.binarySource(1, 100, 50), "'-' binary record=(100,50) format='%float'")
        self.gp.command('plot {0} with lines'.format(self.gp.binarySource(2, 2)))
        self.gp.writeValues([(0, 1), (1, 4)])
        self.gp.writeFloat(2.0)
        self.assertEqual(self.written(), b"plot '-' binary record=(2) format='%float%float' with lines\n" +
                         floats(0, 1, 1, 4) + floats(2.0))

    def testDefineDataset(self):
        self.gp.defineDataset('data7', [1, 2, 3, 4, 5, 6], 2, 3)
        self.gp.command('plot $data7 with lines')
        self.assertEqual(self.written(), b'$data7 << EOD\n1 2\n3 4\n5 6\n\nEOD\nplot $data7 with lines\n')

    def testDefineDatasetFailure(self):
        with self.assertRaises(InsufficientData):
            self.gp.defineDataset('data0', [1, 2, 3, 4, 5], 2, 3)
        with self.assertRaises(ExcessData):
            self.gp.defineDataset('data0', [1, 2, 3, 4, 5, 6, 7], 2, 3)
        with self.assertRaises(ExcessData):
            self.gp.defineDataset('d', range(4), 1, 3)
        self.assertEqual(self.written(), b'')

    def testHeredoc(self):
        first = self.gp.heredoc([0.5, 1.0])
        second = self.gp.heredoc(((x, y, x * y) for x, y in coordinateGrid(2, 2)), recordsPerBlock=2)
        self.assertEqual(first, '$data0')
        self.assertEqual(second, '$data1')
        self.assertEqual(self.written(), b'$data0 << EOD\n0.5\n1.0\n\nEOD\n'
                                         b'$data1 << EOD\n0 0 0\n0 1 0\n\n1 0 0\n1 1 1\n\nEOD\n')

    def testUndefine(self):
        self.gp.undefine('data3')
        self.gp.undefine('$data4')
        self.assertEqual(self.written(), b'undefine $data3\nundefine $data4\n')

    def testUniqueDatasetNames(self):
        names = [self.gp.uniqueDatasetName() for _ in range(100)]
        self.assertEqual(len(set(names)), 100)
        self.assertEqual(names, ['data{0}'.format(i) for i in range(100)])
        self.assertEqual(GnuplotSession(PipeSink(io.BytesIO())).uniqueDatasetName(), 'data0')

    def testFlush(self):
        self.gp.command('replot')
        self.gp.flush()
        lines = self.written().split(b'\n')
        self.assertEqual(lines[0], b'replot')
        self.assertEqual(len(lines), 1 + 250 + 1)
        self.assertTrue(all(line.startswith(b'#') for line in lines[1:-1]))
        self.assertEqual(self.stream.flushCount, 1)

    def testFlushPadding(self):
        preferences = GnuplotPreferences()
        preferences.flushPadding = 10
        gp = GnuplotSession(PipeSink(self.stream), preferences=preferences)
        gp.flush()
        self.assertEqual(self.written().count(b'\n'), 10)

    def testCloseTwice(self):
        self.gp.command('plot sin(x)')
        self.gp.close()
        self.gp.close()
        self.assertTrue(self.gp.closed)
        self.assertEqual(self.written(), b'plot sin(x)\n')
        with self.assertRaises(StreamClosed):
            self.gp.command('replot')
        self.assertEqual(self.written(), b'plot sin(x)\n')

    def testWithoutProcess(self):
        self.assertIsNone(self.gp.waitFor(0.1))
        self.assertFalse(self.gp.running)

    def testContextManager(self):
        with GnuplotSession(PipeSink(self.stream)) as gp:
            gp.command('plot x')
        self.assertTrue(gp.closed)
        self.assertEqual(self.stream.content, b'plot x\n')


if __name__ == "__main__":
    unittest.main()
