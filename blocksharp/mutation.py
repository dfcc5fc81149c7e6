"""
Keeping usage sites in step with their definitions.

A call block carries its own copy of the procedure's argument list. A case-builder block
carries its own copy of the case's fields. That copy is what makes the block render with
the right sockets, and it goes stale the moment someone edits the definition.

So whenever a definition changes shape, I take its descriptor (an XML snapshot in which
every parameter has an id that survives renaming) and replay it onto every usage.
Sub-expressions already plugged into a usage follow their parameter by id, not by position:
reorder two parameters, and the arguments swap sockets with them. If a parameter goes away,
whatever was plugged into its socket gets detached and left lying in the workspace.
It is the user's to reattach or throw out; it's not mine to delete.

Each usage whose own descriptor actually changed gets exactly one 'mutation' event.
None of those events go on the undo stack: they follow from the edit to the definition,
which is the thing the user would undo.

This is one pass. Updating a usage never triggers propagation onward from that usage.
"""
import xml.etree.ElementTree as ET
from typing import Optional
from .graph import Node, ChangeEvent

def descriptor_text(element:ET.Element) -> str:
	return ET.tostring(element, encoding='unicode')

def reshape_arguments(usage:Node, param_ids:list[str], prefix:str='ARG') -> list[Node]:
	"""
	Make the usage's argument slots ({prefix}0, {prefix}1, ...) match the given parameter ids.
	Attached arguments follow their id. A usage that never recorded ids (fresh from a template)
	adopts the new ids positionally. Returns the children left without a slot.
	"""
	old_names = usage.input_names(prefix)
	old_ids = usage.state.get('param_ids')
	if old_ids is None or len(old_ids) != len(old_names):
		old_ids = (list(param_ids) + [None]*len(old_names))[:len(old_names)]
	if list(old_ids) == list(param_ids):
		usage.state['param_ids'] = list(param_ids)
		return []
	quarks, orphans = {}, []
	for pid, name in zip(old_ids, old_names):
		child = usage.remove_input(name)
		if child is None: continue
		if pid is None: orphans.append(child)
		else: quarks[pid] = child
	for index, pid in enumerate(param_ids):
		name = prefix+str(index)
		usage.add_input(name)
		child = quarks.pop(pid, None)
		if child is not None and child.parent is None:
			usage.connect(name, child)
	orphans.extend(quarks.values())
	usage.state['param_ids'] = list(param_ids)
	return orphans

def propagate(registry, definition:Node, report=None) -> list[ChangeEvent]:
	"""
	Replay the definition's descriptor onto each of its usages, in workspace-scan order.
	Returns the events fired, one per usage whose descriptor changed.
	"""
	workspace = definition.workspace
	descriptor = registry.descriptor(definition)
	name = descriptor.get('name')
	events = []
	with workspace.undo_suppressed():
		for usage in registry.find_usages(name, workspace):
			if usage is definition: continue
			old_form = descriptor_text(registry.usage_descriptor(usage))
			orphans = registry.apply(usage, descriptor)
			if report is not None:
				for orphan in orphans:
					report.orphaned(usage.id, orphan.id)
			new_form = descriptor_text(registry.usage_descriptor(usage))
			if old_form != new_form:
				events.append(workspace.fire(usage, 'mutation', old_form, new_form))
	if report is not None:
		report.info("Propagated %s to %d of its usages."%(name, len(events)))
	return events

def bool_attribute(element:ET.Element, name:str, default:bool) -> bool:
	""" Older descriptors may lack newer flags; absent means the old behavior. """
	value:Optional[str] = element.get(name)
	if value is None: return default
	return value == 'true'

def bool_text(flag:bool) -> str:
	return 'true' if flag else 'false'
