"""
Algebraic datatypes come out as F# discriminated unions:

	type Shape =
	| Circle of float
	| Rectangle of float * float

The definition is hoisted. Its shape is read from the blocks as they stand right now.
"""
from ..generator import emitter, Order, Generation, TYPE_KEY
from ..graph import Node
from ..names import Category
from ..datatypes import DATATYPES, CaseDef, describe_case
from ..type_model import FSType, Tuple, Function, render_target

def _field(t:FSType) -> str:
	# Within `of`, a star separates fields; a tuple-typed field needs its own parentheses.
	text = render_target(t)
	return "(%s)"%text if isinstance(t, (Tuple, Function)) else text

def case_line(gen:Generation, case:CaseDef) -> str:
	line = '| ' + gen.name(case.name, Category.ALGEBRAIC_DATATYPE)
	if case.fields:
		line += ' of ' + ' * '.join(_field(t) for t in case.fields)
	return line

@emitter('typedefinition')
def typedefinition(gen:Generation, node:Node):
	adt = DATATYPES.describe_definition(node)
	name = gen.name(adt.name, Category.ALGEBRAIC_DATATYPE)
	if adt.type_params:
		name += "<%s>"%", ".join("'"+p for p in adt.type_params)
	lines = ['type %s ='%name]
	lines.extend(case_line(gen, case) for case in adt.cases)
	gen.define(TYPE_KEY+name, gen.scrub(node, '\n'.join(lines)+'\n', this_only=True))
	return None

@emitter('case')
def case(gen:Generation, node:Node):
	return case_line(gen, describe_case(node)) + '\n'

@emitter('type_builder')
def type_builder(gen:Generation, node:Node):
	name = gen.name(node.field('NAME') or '', Category.ALGEBRAIC_DATATYPE)
	args = [gen.value_to_code(node, slot, Order.COMMA) for slot in node.input_names('ARG')]
	args = [a for a in args if a]
	if not args:
		return name, Order.ATOMIC
	return "%s(%s)"%(name, ", ".join(args)), Order.TYPE_CREATION
