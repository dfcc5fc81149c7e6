"""
Numbers and the things done to them. Anything from System.Math brings in `open System`.
"""
from ..generator import emitter, Order, Generation
from ..graph import Node

OPEN_SYSTEM = 'open System'

BINARY_OPERATORS = {
	'ADD': (' + ', Order.ADDITIVE),
	'MINUS': (' - ', Order.ADDITIVE),
	'MULTIPLY': (' * ', Order.MULTIPLICATIVE),
	'DIVIDE': (' / ', Order.MULTIPLICATIVE),
	'POWER': (' ** ', Order.EXPONENT),
}

# Each takes its operand by juxtaposition.
MATH_FUNCTIONS = {
	'ABS': 'Math.Abs',
	'ROOT': 'Math.Sqrt',
	'LN': 'Math.Log',
	'LOG10': 'Math.Log10',
	'EXP': 'Math.Exp',
	'ROUND': 'Math.Round',
	'ROUNDUP': 'Math.Ceiling',
	'ROUNDDOWN': 'Math.Floor',
}

# Trigonometry is in degrees on the blocks, radians in .NET.
TRIGONOMETRY = {'SIN': 'Math.Sin', 'COS': 'Math.Cos', 'TAN': 'Math.Tan'}
INVERSE_TRIGONOMETRY = {'ASIN': 'Math.Asin', 'ACOS': 'Math.Acos', 'ATAN': 'Math.Atan'}

CONSTANTS = {
	'PI': ('Math.PI', Order.MEMBER),
	'E': ('Math.E', Order.MEMBER),
	'GOLDEN_RATIO': ('(1.0 + Math.Sqrt 5.0) / 2.0', Order.MULTIPLICATIVE),
	'SQRT2': ('Math.Sqrt 2.0', Order.FUNCTION_APPLICATION),
	'SQRT1_2': ('Math.Sqrt 0.5', Order.FUNCTION_APPLICATION),
	'INFINITY': ('infinity', Order.ATOMIC),
}

@emitter('math_number')
def math_number(gen:Generation, node:Node):
	text = str(node.field('NUM', 0)).strip()
	if text in ('Infinity', 'inf'): return 'infinity', Order.ATOMIC
	if text in ('-Infinity', '-inf'): return '-infinity', Order.PREFIX_OPERATORS
	return text, (Order.PREFIX_OPERATORS if text.startswith('-') else Order.ATOMIC)

@emitter('math_arithmetic')
def math_arithmetic(gen:Generation, node:Node):
	operator, order = BINARY_OPERATORS[node.field('OP')]
	a = gen.value_to_code(node, 'A', order) or '0'
	b = gen.value_to_code(node, 'B', order) or '0'
	return a + operator + b, order

@emitter('math_single')
def math_single(gen:Generation, node:Node):
	op = node.field('OP')
	if op == 'NEG':
		return '-' + (gen.value_to_code(node, 'NUM', Order.PREFIX_OPERATORS) or '0'), Order.PREFIX_OPERATORS
	gen.require(OPEN_SYSTEM)
	if op in MATH_FUNCTIONS:
		return MATH_FUNCTIONS[op] + ' ' + (gen.value_to_code(node, 'NUM', Order.ATOMIC) or '0'), Order.FUNCTION_APPLICATION
	arg = gen.value_to_code(node, 'NUM', Order.NONE) or '0'
	if op == 'POW10':
		return 'Math.Pow(10.0, %s)'%arg, Order.FUNCTION_APPLICATION
	if op in TRIGONOMETRY:
		return '%s(%s / 180.0 * Math.PI)'%(TRIGONOMETRY[op], arg), Order.FUNCTION_APPLICATION
	if op in INVERSE_TRIGONOMETRY:
		return '%s(%s) / Math.PI * 180.0'%(INVERSE_TRIGONOMETRY[op], arg), Order.MULTIPLICATIVE
	raise ValueError('Unknown math operator: %r'%op)

@emitter('math_constant')
def math_constant(gen:Generation, node:Node):
	code, order = CONSTANTS[node.field('CONSTANT')]
	if 'Math.' in code:
		gen.require(OPEN_SYSTEM)
	return code, order

@emitter('math_modulo')
def math_modulo(gen:Generation, node:Node):
	dividend = gen.value_to_code(node, 'DIVIDEND', Order.MULTIPLICATIVE) or '0'
	divisor = gen.value_to_code(node, 'DIVISOR', Order.MULTIPLICATIVE) or '0'
	return dividend + ' % ' + divisor, Order.MULTIPLICATIVE
