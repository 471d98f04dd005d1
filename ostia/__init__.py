from ostia.base import SampleConflict, AlphabetRangeError, InvariantViolation
from ostia.fragment import Fragment, NIL
from ostia.state import State, Edge, Blue
from ostia.ptt import build_ptt, is_onward
from ostia.merge import ostia
from ostia.transducer import SubsequentialTransducer, OSTIA, learn, run
from ostia import examples
