# *****************************************************************
# IonControl:  Copyright 2016 Sandia Corporation
# This Software is released under the GPL license detailed
# in the file "license.txt" in the top-level IonControl directory
# *****************************************************************
"""
Text framing of named datasets (here-documents).

A here-document is sent as::

    $name << EOD
    x0 y0 z0
    x0 y1 z1

    x1 y0 z0
    ...
    EOD

Values are grouped into records (one line of fieldsPerRecord tokens), records into
blocks (terminated by a blank line) and blocks into frames (separated by an extra
blank line, which gnuplot reads as a new index). Each grouping level has an
optional bound. None means the level continues until the values are exhausted,
an integer means exactly that many and running out early is an error.
"""
import numbers
from collections import deque

from .Errors import InsufficientData, ExcessData
from .iteratortools import flattenRecords

heredocTerminator = 'EOD'


class ValueSource:
    """iterator with lookahead, needed to decide at group boundaries whether another record follows"""
    def __init__(self, values):
        self.iterator = iter(values)
        self.buffer = deque()
        self.consumed = 0

    def available(self, count):
        """True if at least count more values can be taken"""
        while len(self.buffer) < count:
            try:
                self.buffer.append(next(self.iterator))
            except StopIteration:
                return False
        return True

    def exhausted(self):
        return not self.available(1)

    def take(self, count):
        if not self.available(count):
            raise InsufficientData("Insufficient data: values ran out after {0} values".format(
                self.consumed + len(self.buffer)))
        self.consumed += count
        return [self.buffer.popleft() for _ in range(count)]


def checkBound(name, bound):
    if bound is None:
        return
    if isinstance(bound, bool) or not isinstance(bound, numbers.Integral) or bound <= 0:
        raise ValueError("{0} must be a positive integer or None, got {1!r}".format(name, bound))


def formatValue(v):
    if isinstance(v, numbers.Integral):
        return str(int(v))
    return repr(float(v))


def _groups(source, bound, fieldsPerRecord, groupSize, mandatory=True):
    """yield group indices up to bound, or while another whole group is available if bound is None.

    groupSize is the number of values in one group if every level below is bounded,
    otherwise fieldsPerRecord. The first group of an unbounded level only needs one
    complete record, and a nested unbounded level always yields its first group, so an
    enclosing bounded group that finds no values left fails in take() instead of ending up empty.
    """
    index = 0
    while True:
        if bound is not None:
            if index >= bound:
                return
        elif index == 0:
            if not (mandatory or source.available(fieldsPerRecord)):
                return
        elif not source.available(groupSize):
            return
        yield index
        index += 1


def _groupSize(fieldsPerRecord, *innerBounds):
    if any(bound is None for bound in innerBounds):
        return fieldsPerRecord
    size = fieldsPerRecord
    for bound in innerBounds:
        size *= bound
    return size


def frameDataset(values, fieldsPerRecord, recordsPerBlock=None, blocksPerFrame=None, framesTotal=None):
    """Return the body lines of a here-document.

    Raises InsufficientData if the values run out before a bounded level is complete,
    ExcessData if values are left once every level is complete. An unbounded level only
    starts another group while that whole group is left (or one record, where a level
    below is unbounded), so a trailing partial record or partial block counts as excess.
    """
    checkBound('fieldsPerRecord', fieldsPerRecord)
    if fieldsPerRecord is None:
        raise ValueError("fieldsPerRecord must be a positive integer")
    checkBound('recordsPerBlock', recordsPerBlock)
    checkBound('blocksPerFrame', blocksPerFrame)
    checkBound('framesTotal', framesTotal)

    source = ValueSource(flattenRecords(values))
    lines = list()
    frameSize = _groupSize(fieldsPerRecord, recordsPerBlock, blocksPerFrame)
    blockSize = _groupSize(fieldsPerRecord, recordsPerBlock)
    for frame in _groups(source, framesTotal, fieldsPerRecord, frameSize, mandatory=False):
        if frame > 0:
            lines.append('')
        for _ in _groups(source, blocksPerFrame, fieldsPerRecord, blockSize):
            for _ in _groups(source, recordsPerBlock, fieldsPerRecord, fieldsPerRecord):
                lines.append(' '.join(formatValue(v) for v in source.take(fieldsPerRecord)))
            lines.append('')
    if not source.exhausted():
        raise ExcessData("Excess data: values left after {0} values".format(source.consumed))
    return lines


def hereDocument(name, values, fieldsPerRecord, recordsPerBlock=None, blocksPerFrame=None, framesTotal=None):
    """complete here-document text including header and terminator, newline terminated"""
    body = frameDataset(values, fieldsPerRecord, recordsPerBlock, blocksPerFrame, framesTotal)
    lines = ['${0} << {1}'.format(name, heredocTerminator)]
    lines.extend(body)
    lines.append(heredocTerminator)
    return '\n'.join(lines) + '\n'
