"""
Things worth telling somebody about, but never worth stopping over.

Nothing in the core treats a dangling reference or a detached argument as an error.
These are ordinary outcomes of editing a program one block at a time.
Still, a command-line user or a test may want to know what happened,
so the generator and the propagator take a Report and jot things down.
"""
import sys, random
from typing import NamedTuple, Optional

class Issue(NamedTuple):
	node_id: Optional[str]
	message: str
	def __str__(self):
		return "%s: %s"%(self.node_id, self.message) if self.node_id else self.message

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]
	minced_oaths = ['Ack', 'Blargh', 'Confound it', 'Crud', 'Drat', 'Fiddlesticks', 'Good Grief', 'Rats']
	resignations = ['I cannot continue.', 'I need to ask for help.', 'Something is amiss.']
	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues:list[Issue] = []

	@property
	def issues(self) -> list[Issue]: return list(self._issues)

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, node_id:Optional[str], message:str):
		self._issues.append(Issue(node_id, message))
		self.info(" ", message)

	def reset(self):
		self._issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		for issue in self._issues:
			print(issue, file=sys.stderr)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Things the generator mentions:

	def unresolved_reference(self, node_id:str, kind:str, name:str):
		self.issue(node_id, "Nothing defines the %s %r; emitting the name as written."%(kind, name))

	def untyped_parameter(self, node_id:str, name:str):
		self.issue(node_id, "Parameter %r has no declared type; treating it as unit."%name)

	# Things the propagator mentions:

	def orphaned(self, usage_id:str, orphan_id:str):
		self.issue(usage_id, "Detached %s; its parameter no longer exists."%orphan_id)
