"""Cross-reference comments for the UUIDs of a project document.

Xcode writes ``13B07F961A680F5B00A75B9A /* AppDelegate.m in Sources */``
wherever an object is referenced. The comment is derived from the object
graph: who owns the object, and what it is called.
"""

import logging
from urllib.parse import urlparse

from .errors import ConsistencyError
from .isa import Isa, build_phase_name

log = logging.getLogger(__name__)

_IN_PROGRESS = object()


def _first(record, *keys):
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


class ReferenceIndex:
    """Reverse lookups over ``objects``, built once per document."""

    def __init__(self, document):
        objects = document.get("objects") if isinstance(document, dict) else None
        self.objects = objects if isinstance(objects, dict) else {}
        self.root = document.get("rootObject") if isinstance(document, dict) else None
        # build file -> containing build phase
        self.phase_of = {}
        # configuration list -> object using it
        self.owner_of = {}
        # containerPortal -> PBXContainerItemProxy
        self.proxy_for = {}

        for uuid, record in self.objects.items():
            if not isinstance(record, dict):
                continue
            files = record.get("files")
            if isinstance(files, list):
                for file_id in files:
                    if isinstance(file_id, str):
                        self.phase_of.setdefault(file_id, uuid)
            config = record.get("buildConfigurationList")
            if isinstance(config, str):
                self.owner_of.setdefault(config, uuid)
            portal = record.get("containerPortal")
            if record.get("isa") == Isa.PBXContainerItemProxy and isinstance(portal, str):
                self.proxy_for.setdefault(portal, record)


def comment_for(uuid, index, cache):
    """Return the comment for ``uuid``, filling ``cache`` along the way."""
    cached = cache.get(uuid)
    if cached is _IN_PROGRESS:
        record = index.objects.get(uuid)
        raise ConsistencyError(uuid, record.get("isa"), "circular reference")
    if cached is not None:
        return cached

    record = index.objects.get(uuid)
    if not isinstance(record, dict) or not isinstance(record.get("isa"), str):
        isa = record.get("isa") if isinstance(record, dict) else None
        raise ConsistencyError(uuid, isa, "not a record" if uuid in index.objects else "missing object")

    cache[uuid] = _IN_PROGRESS
    comment = str(_describe(uuid, record, index, cache))
    cache[uuid] = comment
    return comment


def _describe(uuid, record, index, cache):
    isa = record["isa"]
    kind = Isa.of(isa)

    if kind is Isa.PBXBuildFile:
        return _build_file_comment(uuid, record, index, cache)
    if kind is Isa.XCConfigurationList:
        return _configuration_list_comment(uuid, index)
    if kind is Isa.XCRemoteSwiftPackageReference:
        url = record.get("repositoryURL")
        return f'{isa} "{_repository_name(url)}"' if url else isa
    if kind is Isa.PBXProject or uuid == index.root:
        return "Project object"
    if isa.endswith("BuildPhase"):
        name = record.get("name")
        return name if name is not None else build_phase_name(isa)
    return _first(record, "name", "path", "productName", "isa")


def _build_file_comment(uuid, record, index, cache):
    ref = _first(record, "fileRef", "productRef")
    if not isinstance(ref, str) or ref not in index.objects:
        raise ConsistencyError(uuid, record["isa"], f"missing referenced object {ref}")
    name = comment_for(ref, index, cache)

    phase = index.phase_of.get(uuid)
    phase_name = comment_for(phase, index, cache) if phase is not None else "[missing build phase]"
    return f"{name} in {phase_name}"


def _configuration_list_comment(uuid, index):
    owner_id = index.owner_of.get(uuid)
    if owner_id is None:
        return "Build configuration list for [unknown]"

    owner = index.objects[owner_id]
    name = _first(owner, "name", "path", "productName")
    if not name:
        # The project object has no name; use its first target, then a proxy pointing at it.
        name = _first_target_name(owner, index)
    if not name:
        proxy = index.proxy_for.get(owner_id)
        name = proxy.get("remoteInfo") if proxy else None
    return f'Build configuration list for {owner.get("isa")} "{name or ""}"'


def _first_target_name(owner, index):
    targets = owner.get("targets")
    if not isinstance(targets, list) or not targets:
        return None
    target = index.objects.get(targets[0])
    if not isinstance(target, dict):
        return None
    return _first(target, "productName", "name")


def _repository_name(url):
    parsed = urlparse(url)
    # github.com/expo/spm-package -> spm-package
    if parsed.hostname == "github.com":
        return parsed.path.rstrip("/").split("/")[-1]
    return url


def create_reference_list(document):
    """Map every UUID in ``document["objects"]`` to its comment.

    Raises ConsistencyError if any object ends up without a comment.
    """
    index = ReferenceIndex(document)
    cache = {}
    for uuid in index.objects:
        if not comment_for(uuid, index, cache):
            record = index.objects[uuid]
            raise ConsistencyError(uuid, record.get("isa"))
    log.debug("computed %d reference comments", len(cache))
    return cache
