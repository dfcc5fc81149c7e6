"""
The F# code generator: a walk over the block graph, one emitter per kind of block.

Emitters live in the `blocksharp.emit` modules and register themselves in EMITTERS,
a flat table from block kind to function. An emitter gets the current Generation and the node.
A value-shaped block's emitter returns (code, order): the text, and how tightly the outermost
operator in that text binds. A statement-shaped block's emitter returns text, newline-terminated.
Some emitters (type, procedure, and builder definitions) return None instead: they put their text
among the hoisted definitions, which come out at the top of the program.

Parentheses are the caller's business. Asking for a child's code comes with the loosest order
the caller can tolerate there; if the child's own operator binds no tighter, it gets wrapped.
A few pairings never need wrapping. They're in ORDER_OVERRIDES.

A Generation is good for one run. `generate()` makes a fresh one every time.
"""
import enum, re, textwrap
from typing import NamedTuple, Callable, Optional, Union
from .graph import Node, Workspace
from .names import Category, NameDB, UNNAMED
from .diagnostics import Report

class Order(enum.IntEnum):
	ATOMIC = 0
	FTYPES = 1
	TYPE_CREATION = 2
	MEMBER = 3
	PREFIX_OPERATORS = 4
	PIPE_PATTERN_MATCH = 5
	FUNCTION_APPLICATION = 6
	EXPONENT = 7
	MULTIPLICATIVE = 8
	ADDITIVE = 9
	TYPE_CHECK = 10
	LIST_OPERATOR = 11
	STATIC_TYPE = 12
	RELATIONAL = 13
	TYPE_CASTING = 14
	AND = 15
	OR = 16
	COMMA = 17
	FUNCTION_ARROW = 18
	NOT = 19
	IF = 20
	FUNCTION_MATCH_TRY = 21
	LET = 22
	SEMI_COLON = 23
	PIPE = 24
	WHEN = 25
	AS = 26
	NONE = 99

ORDER_OVERRIDES = frozenset([
	# a.b.c and f a.b
	(Order.MEMBER, Order.MEMBER),
	(Order.FUNCTION_APPLICATION, Order.MEMBER),
	# a && b && c
	(Order.AND, Order.AND),
	# a || b || c
	(Order.OR, Order.OR),
])

def needs_parentheses(outer:Order, inner:Order) -> bool:
	if outer > inner: return False
	if outer == inner and outer in (Order.ATOMIC, Order.NONE): return False
	return (outer, inner) not in ORDER_OVERRIDES

# Namespaces for hoisted definitions, so a type and a function of the same name can't clobber each other.
TYPE_KEY = '%%'
PROCEDURE_KEY = '%'
BUILDER_KEY = '%%%'

class Options(NamedTuple):
	indent: str = "    "
	comment_wrap: int = 60
	unnamed: str = UNNAMED

Emitted = Union[None, str, tuple[str, Order]]
EMITTERS:dict[str, Callable[["Generation", Node], Emitted]] = {}

def emitter(*kinds:str):
	def register(fn):
		for kind in kinds:
			assert kind not in EMITTERS, kind
			EMITTERS[kind] = fn
		return fn
	return register

class NoEmitter(KeyError):
	""" A block kind the generator has never heard of. That's a bug, not a user error. """

def prefix_lines(text:str, prefix:str) -> str:
	return ''.join(prefix+line if line.strip() else line for line in text.splitlines(keepends=True))

def quote(text:str) -> str:
	""" An F# string literal. """
	escaped = text.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n').replace('\t', '\\t')
	return '"%s"'%escaped

_BLANK_RUNS = re.compile(r'\n{3,}')

class Generation:
	def __init__(self, workspace:Workspace, options:Options=Options(), report:Optional[Report]=None):
		self.workspace = workspace
		self.options = options
		self.report = report or Report(verbose=False)
		self.reset()

	def reset(self):
		self.definitions:dict[str, str] = {}
		self.imports:dict[str, str] = {}
		self.names = NameDB(unnamed=self.options.unnamed)

	@property
	def indent(self) -> str: return self.options.indent

	def name(self, name:str, category:Category) -> str:
		return self.names.get_name(name, category)

	def define(self, key:str, code:str):
		self.definitions[key] = code

	def require(self, line:str):
		""" An `open` or similar, to sit above everything else. Said once however often required. """
		self.imports.setdefault(line, line)

	# The walk

	def block_to_code(self, node:Optional[Node], this_only:bool=False) -> Union[str, tuple[str, Order]]:
		if node is None:
			return ''
		if node.disabled:
			return '' if this_only else self.block_to_code(node.next)
		try: emit = EMITTERS[node.kind]
		except KeyError:
			raise NoEmitter(node.kind) from None
		code = emit(self, node)
		if code is None:
			return ''
		if isinstance(code, tuple):
			return self.scrub(node, code[0], this_only), code[1]
		return self.scrub(node, code, this_only)

	def value_to_code(self, node:Node, slot:str, outer:Order) -> str:
		target = node.child(slot)
		if target is None:
			return ''
		found = self.block_to_code(target)
		if not found:
			return ''
		if isinstance(found, str):
			raise TypeError("Expected a value in %s of %r; got a statement."%(slot, node))
		code, inner = found
		if code and needs_parentheses(outer, inner):
			code = '(' + code + ')'
		return code

	def statement_to_code(self, node:Node, slot:str, indent:Optional[str]=None) -> str:
		code = self.block_to_code(node.child(slot))
		if isinstance(code, tuple):
			raise TypeError("Expected a statement in %s of %r; got a value."%(slot, node))
		return prefix_lines(code, self.indent if indent is None else indent)

	def scrub(self, node:Node, code:str, this_only:bool=False) -> str:
		""" Tack on the node's comments (and those of its value children), then the statements after it. """
		comments = []
		if not node.is_value_child():
			if node.comment:
				comments.append(self.wrap_comment(node.comment))
			comments.extend(self.value_comments(node))
		comment_code = prefix_lines(''.join(c+'\n' for c in comments), '// ')
		next_code = '' if this_only else self.block_to_code(node.next)
		return comment_code + code + next_code

	def value_comments(self, node:Node):
		""" Comments on nested value children. Statements below them speak for themselves when scrubbed. """
		for slot in node.inputs.values():
			child = slot.target
			if child is None or slot.statement: continue
			if child.comment:
				yield self.wrap_comment(child.comment)
			yield from self.value_comments(child)

	def wrap_comment(self, comment:str) -> str:
		width = self.options.comment_wrap - 3
		return '\n'.join(textwrap.fill(line, width) or line for line in comment.splitlines())

	def finish(self, code:str) -> str:
		""" Imports, then hoisted definitions in the order they were made, then the code. """
		parts = []
		if self.imports:
			parts.append('\n'.join(self.imports.values()))
		if self.definitions:
			parts.append('\n\n'.join(d.rstrip('\n') for d in self.definitions.values()))
		if code.strip():
			parts.append(code.strip('\n'))
		self.reset()
		if not parts:
			return ''
		return _BLANK_RUNS.sub('\n\n', '\n\n'.join(parts)) + '\n'

	def workspace_to_code(self) -> str:
		chunks = []
		for top in self.workspace.top_nodes():
			found = self.block_to_code(top)
			if isinstance(found, tuple):
				# A value with nowhere to go stands on its own line.
				found = found[0] + '\n' if found[0] else ''
			if found:
				chunks.append(found)
		return self.finish('\n'.join(chunks))

def generate(workspace:Workspace, options:Options=Options(), report:Optional[Report]=None) -> str:
	from .emit import catalog  # Fills in EMITTERS.
	return Generation(workspace, options, report).workspace_to_code()
