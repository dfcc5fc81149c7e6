"""
Names: the user picks them, F# has opinions about them, and they must not collide.

Two different jobs live here.

Display names belong to definitions in the workspace. When someone names a procedure
"foo" and there's already a "foo", the new one becomes "foo2". This is a pure function
of the candidate and the names already in use: call it twice, get the same answer.
Categories are separate namespaces; a procedure and a datatype may share a name.

Target identifiers are the generator's concern. During one generation run, every
display name gets mapped to something the F# compiler will accept: no reserved words,
no funny characters, no leading digits, and no two different names mapped to the same
identifier. That's the NameDB.
"""
import enum, re
from typing import Callable

class Category(enum.Enum):
	PROCEDURE = 'procedure'
	VARIABLE = 'variable'
	ALGEBRAIC_DATATYPE = 'datatype'
	COMPUTATION_EXPRESSION = 'workflow'

UNNAMED = 'unnamed'

RESERVED_WORDS = frozenset("""
	abstract and as assert base begin class default delegate do done downcast downto elif else
	end exception extern false finally fixed for fun function global if in inherit inline
	interface internal lazy let match member module mutable namespace new not null of open or
	override private public rec return select sig static struct then to true try type upcast
	use val void when while with yield
	atomic break checked component const constraint constructor continue eager event external
	functor include method mixin object parallel process protected pure sealed tailcall trait
	virtual volatile
	math random Number System
""".split())

def names_equal(a:str, b:str) -> bool:
	""" The one rule for comparing names, everywhere names get compared. """
	return a.casefold() == b.casefold()

_TRAILING_DIGITS = re.compile(r'^(.*?)(\d+)$')

def find_legal_name(candidate:str, is_used:Callable[[str], bool], unnamed:str=UNNAMED) -> str:
	name = candidate.strip() or unnamed
	while is_used(name):
		match = _TRAILING_DIGITS.match(name)
		if match:
			name = match.group(1) + str(int(match.group(2)) + 1)
		else:
			name += '2'
	return name

_NOT_WORDY = re.compile(r'\W')

def safe_name(name:str, unnamed:str=UNNAMED) -> str:
	if not name: return unnamed
	name = _NOT_WORDY.sub('_', name)
	if name[0].isdigit():
		name = 'my_' + name
	return name

class NameDB:
	"""
	Generation-time identifiers. One of these lives for exactly one generation run.
	The same (name, category) always maps to the same identifier within the run,
	and distinct names never share an identifier, whatever their category.
	"""
	def __init__(self, reserved=RESERVED_WORDS, unnamed:str=UNNAMED):
		self._reserved = set(reserved)
		self._unnamed = unnamed
		self._db = {}
		self._taken = set()

	def get_name(self, name:str, category:Category) -> str:
		key = category, name
		if key not in self._db:
			self._db[key] = self.get_distinct_name(name)
		return self._db[key]

	def get_distinct_name(self, name:str) -> str:
		base = safe_name(name, self._unnamed)
		identifier, suffix = base, 1
		while identifier in self._taken or identifier in self._reserved:
			suffix += 1
			identifier = base + str(suffix)
		self._taken.add(identifier)
		return identifier
