"""
The type model: what the blocks say about types, as plain value objects.

There is no inference here. Types are declared by the user, either by snapping
type-blocks together or by way of a mutator dialog, and the job of this module is
to represent them faithfully and say them out loud in two different voices:

* `render` gives the display form. It documents a call shape, so functions
  read like `(int, string) -> bool`.
* `render_target` gives F#. There, functions are curried: `int -> string -> bool`.

The divergence is on purpose. Don't "fix" one to match the other.

Types also travel in two other shapes: as a fragment of type-blocks (to preview an
existing type inside a mutator) and as an XML element (inside the structural
descriptors that keep usage sites in sync). Both directions live here.

As with the type calculus in the interpreter this grew out of, each type gets a
number from an equivalence classifier. Composite types key on their parts' numbers,
which keeps hashing and equality cheap and structural.
"""
import xml.etree.ElementTree as ET
from typing import Iterable, Optional
from boozetools.support.foundation import EquivalenceClassifier, Visitor
from .graph import Node, Workspace

PRIMITIVE_NAMES = ('int', 'float', 'string', 'char', 'bool', 'unit')

class InvalidArity(ValueError):
	""" A composite type got too few parts. """

class MalformedPersistedForm(ValueError):
	""" An XML type element is missing something there's no safe default for. """

_type_numbering_subsystem = EquivalenceClassifier()

class FSType:
	"""Value objects so they can play well with the classifier"""
	def visit(self, visitor:"TypeVisitor"): raise NotImplementedError(type(self))

	def __init__(self, *key):
		self._key = key
		self._hash = hash(key)
		self.number = _type_numbering_subsystem.classify(self)
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key
	def __repr__(self): return self.visit(Render())

def _nested(t:FSType) -> FSType:
	assert isinstance(t, FSType), t
	if isinstance(t, NullType):
		raise ValueError("Null is only a placeholder; it does not nest.")
	return t

class Primitive(FSType):
	def __init__(self, name:str):
		if name not in PRIMITIVE_NAMES:
			raise ValueError("Not a primitive type: %r"%name)
		self.name = name
		super().__init__(name)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_primitive(self)

class Poly(FSType):
	""" A type variable. The name is the bare letter; the apostrophe is a rendering matter. """
	def __init__(self, name:str):
		if not name or name.startswith("'"):
			raise ValueError("Not a type-variable name: %r"%name)
		self.name = name
		super().__init__(name)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_poly(self)

class Tuple(FSType):
	def __init__(self, elements:Iterable[FSType]):
		self.elements = tuple(_nested(e) for e in elements)
		if len(self.elements) < 2:
			raise InvalidArity("A tuple needs at least two elements, not %d."%len(self.elements))
		super().__init__(*(e.number for e in self.elements))
	def visit(self, visitor:"TypeVisitor"): return visitor.on_tuple(self)

class Function(FSType):
	def __init__(self, inputs:Iterable[FSType], output:Optional[FSType]=None):
		self.inputs = tuple(_nested(i) for i in inputs)
		self.output = None if output is None else _nested(output)
		super().__init__(tuple(i.number for i in self.inputs), None if output is None else output.number)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_function(self)

class Datatype(FSType):
	""" Refers to a user-defined algebraic datatype by name only. """
	def __init__(self, name:str, type_args:Iterable[FSType]=()):
		self.name = name
		self.type_args = tuple(_nested(a) for a in type_args)
		super().__init__(name, *(a.number for a in self.type_args))
	def visit(self, visitor:"TypeVisitor"): return visitor.on_datatype(self)

class NullType(FSType):
	def __init__(self): super().__init__()
	def visit(self, visitor:"TypeVisitor"): return visitor.on_null()

NULL = NullType()
INT, FLOAT, STRING, CHAR, BOOL, UNIT = map(Primitive, PRIMITIVE_NAMES)

def poly_letter(n:int) -> str:
	""" 0 -> a, 25 -> z, 26 -> aa, and so on. """
	name = ""
	n += 1
	while n:
		n, remainder = divmod(n-1, 26)
		name = chr(97+remainder) + name
	return name

class TypeVisitor:
	def on_primitive(self, p:Primitive): raise NotImplementedError(type(self))
	def on_poly(self, p:Poly): raise NotImplementedError(type(self))
	def on_tuple(self, t:Tuple): raise NotImplementedError(type(self))
	def on_function(self, f:Function): raise NotImplementedError(type(self))
	def on_datatype(self, d:Datatype): raise NotImplementedError(type(self))
	def on_null(self): raise NotImplementedError(type(self))

class Render(TypeVisitor):
	""" The display form, as shown on blocks and in dialogs. """
	def on_primitive(self, p:Primitive): return p.name
	def on_poly(self, p:Poly): return "'"+p.name
	def on_tuple(self, t:Tuple):
		return "tuple(%s)"%", ".join(e.visit(self) for e in t.elements)
	def on_function(self, f:Function):
		if f.inputs: front = "(%s)"%", ".join(i.visit(self) for i in f.inputs)
		else: front = "unit"
		return front + " -> " + ("unit" if f.output is None else f.output.visit(self))
	def on_datatype(self, d:Datatype):
		return "%s<%s>"%(d.name, ", ".join(a.visit(self) for a in d.type_args))
	def on_null(self): return "?"

class RenderTarget(TypeVisitor):
	""" F# type syntax. Arrows associate right, so only arrow inputs need parentheses. """
	def on_primitive(self, p:Primitive): return p.name
	def on_poly(self, p:Poly): return "'"+p.name
	def _grouped(self, t:FSType):
		text = t.visit(self)
		return "(%s)"%text if isinstance(t, (Tuple, Function)) else text
	def on_tuple(self, t:Tuple):
		return " * ".join(self._grouped(e) for e in t.elements)
	def on_function(self, f:Function):
		parts = [self._grouped(i) if isinstance(i, Function) else i.visit(self) for i in f.inputs] or ["unit"]
		parts.append("unit" if f.output is None else f.output.visit(self))
		return " -> ".join(parts)
	def on_datatype(self, d:Datatype):
		return "%s<%s>"%(d.name, ", ".join(a.visit(self) for a in d.type_args))
	def on_null(self): return "unit"

def render(t:FSType) -> str: return t.visit(Render())
def render_target(t:FSType) -> str: return t.visit(RenderTarget())

###############################################################################
# Block fragments

TYPE_KINDS = frozenset(['type_'+name for name in PRIMITIVE_NAMES] + [
	'type_poly', 'type_tuple', 'type_function', 'type_list', 'type_option', 'datatype',
])
CONTAINER_KINDS = {'type_list':'list', 'type_option':'option'}

def is_type_kind(kind:str) -> bool:
	return kind in TYPE_KINDS

def tuple_slot(index:int) -> str:
	return ('FST', 'SND')[index] if index < 2 else 'ADD%d'%(index-2)

class _FragmentReader:
	""" One pass over a fragment; unbound datatype slots draw fresh letters as they go. """
	def __init__(self):
		self._letters = 0

	def fresh(self) -> Poly:
		it = Poly(poly_letter(self._letters))
		self._letters += 1
		return it

	def read(self, node:Optional[Node]) -> FSType:
		if node is None or not is_type_kind(node.kind):
			return NULL
		kind = node.kind
		if kind.startswith('type_') and kind[5:] in PRIMITIVE_NAMES:
			return Primitive(kind[5:])
		if kind == 'type_poly':
			return Poly(node.field('NAME') or self.fresh().name)
		if kind == 'type_tuple':
			return Tuple(self._present(node, [n for n in node.inputs if n in ('FST', 'SND') or n.startswith('ADD')]))
		if kind == 'type_function':
			inputs = self._present(node, node.input_names('INPUT'))
			output = self.read(node.child('OUTPUT'))
			return Function(inputs, None if output is NULL else output)
		if kind in CONTAINER_KINDS:
			inner = self.read(node.child('TYPE'))
			return Datatype(CONTAINER_KINDS[kind], [self.fresh() if inner is NULL else inner])
		assert kind == 'datatype'
		args = [self.read(node.child(name)) for name in node.input_names('ARG')]
		return Datatype(node.field('NAME'), [self.fresh() if a is NULL else a for a in args])

	def _present(self, node:Node, slot_names:list[str]) -> list[FSType]:
		found = (self.read(node.child(name)) for name in slot_names)
		return [t for t in found if t is not NULL]

def from_fragment(node:Optional[Node]) -> FSType:
	"""
	Read the type denoted by a fragment of type-blocks.
	Empty datatype argument slots become poly variables, lettered in slot order.
	Anything that isn't a type-block reads as NULL.
	"""
	return _FragmentReader().read(node)

class _FragmentWriter(Visitor):
	def __init__(self, workspace:Workspace):
		self.workspace = workspace

	def _fill(self, node:Node, slots:list[str], parts:Iterable[FSType]) -> Node:
		for name, part in zip(slots, parts):
			node.add_input(name)
			node.connect(name, self.visit(part))
		return node

	def visit_Primitive(self, p:Primitive): return self.workspace.new_node('type_'+p.name)
	def visit_Poly(self, p:Poly): return self.workspace.new_node('type_poly', NAME=p.name)
	def visit_Tuple(self, t:Tuple):
		slots = [tuple_slot(i) for i in range(len(t.elements))]
		return self._fill(self.workspace.new_node('type_tuple'), slots, t.elements)
	def visit_Function(self, f:Function):
		node = self._fill(self.workspace.new_node('type_function'), ['INPUT%d'%i for i in range(len(f.inputs))], f.inputs)
		node.add_input('OUTPUT')
		if f.output is not None:
			node.connect('OUTPUT', self.visit(f.output))
		return node
	def visit_Datatype(self, d:Datatype):
		for kind, name in CONTAINER_KINDS.items():
			if d.name == name and len(d.type_args) == 1:
				return self._fill(self.workspace.new_node(kind), ['TYPE'], d.type_args)
		node = self.workspace.new_node('datatype', NAME=d.name)
		return self._fill(node, ['ARG%d'%i for i in range(len(d.type_args))], d.type_args)
	def visit_NullType(self, n:NullType): return None

def to_fragment(workspace:Workspace, t:FSType) -> Optional[Node]:
	""" Build the type-blocks spelling out `t`. NULL builds nothing. """
	return _FragmentWriter(workspace).visit(t)

###############################################################################
# Persisted form

class _XmlWriter(Visitor):
	def visit_Primitive(self, p:Primitive, tag:str): return ET.Element(tag, type=p.name)
	def visit_Poly(self, p:Poly, tag:str): return ET.Element(tag, type='poly', name=p.name)
	def visit_Tuple(self, t:Tuple, tag:str):
		element = ET.Element(tag, type='tuple')
		element.extend(self.visit(e, 'item') for e in t.elements)
		return element
	def visit_Function(self, f:Function, tag:str):
		element = ET.Element(tag, type='function')
		element.extend(self.visit(i, 'input') for i in f.inputs)
		if f.output is not None:
			element.append(self.visit(f.output, 'output'))
		return element
	def visit_Datatype(self, d:Datatype, tag:str):
		element = ET.Element(tag, type='datatype', name=d.name)
		element.extend(self.visit(a, 'arg') for a in d.type_args)
		return element
	def visit_NullType(self, n:NullType, tag:str): return ET.Element(tag, type='null')

def to_xml(t:FSType, tag:str='type') -> ET.Element:
	return _XmlWriter().visit(t, tag)

def _required(element:ET.Element, attribute:str) -> str:
	value = element.get(attribute)
	if value is None:
		raise MalformedPersistedForm("<%s> lacks the %r attribute."%(element.tag, attribute))
	return value

def from_xml(element:ET.Element) -> FSType:
	"""
	Read a persisted type. Anything the constructors refuse (a one-element tuple,
	a nested null, a blank type variable) comes out as MalformedPersistedForm.
	"""
	try: return _from_xml(element)
	except MalformedPersistedForm: raise
	except ValueError as ex:
		raise MalformedPersistedForm(str(ex)) from ex

def _from_xml(element:ET.Element) -> FSType:
	kind = _required(element, 'type')
	if kind in PRIMITIVE_NAMES:
		return Primitive(kind)
	if kind == 'null':
		return NULL
	if kind == 'poly':
		return Poly(_required(element, 'name'))
	children = lambda tag: [_from_xml(child) for child in element.findall(tag)]
	if kind == 'tuple':
		return Tuple(children('item'))
	if kind == 'function':
		outputs = children('output')
		if len(outputs) > 1:
			raise MalformedPersistedForm("A function has at most one output.")
		return Function(children('input'), outputs[0] if outputs else None)
	if kind == 'datatype':
		return Datatype(_required(element, 'name'), children('arg'))
	raise MalformedPersistedForm("Unknown type kind %r."%kind)

def optional_from_xml(parent:ET.Element, tag:str) -> Optional[FSType]:
	""" Many descriptors carry an optional typed child. Absent means undeclared. """
	element = parent.find(tag)
	return None if element is None else from_xml(element)
