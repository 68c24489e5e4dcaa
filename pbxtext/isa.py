import re
from enum import Enum


class Isa(str, Enum):
    """Record kinds pbxtext knows how to name and lay out.

    Anything else maps to ``UNKNOWN``; the raw ``isa`` string stays on the
    record and is used as-is for section banners and default comments.
    """

    PBXBuildFile = "PBXBuildFile"

    PBXAppleScriptBuildPhase = "PBXAppleScriptBuildPhase"
    PBXCopyFilesBuildPhase = "PBXCopyFilesBuildPhase"
    PBXFrameworksBuildPhase = "PBXFrameworksBuildPhase"
    PBXHeadersBuildPhase = "PBXHeadersBuildPhase"
    PBXResourcesBuildPhase = "PBXResourcesBuildPhase"
    PBXRezBuildPhase = "PBXRezBuildPhase"
    PBXShellScriptBuildPhase = "PBXShellScriptBuildPhase"
    PBXSourcesBuildPhase = "PBXSourcesBuildPhase"

    PBXContainerItemProxy = "PBXContainerItemProxy"
    PBXFileReference = "PBXFileReference"
    PBXProject = "PBXProject"
    XCConfigurationList = "XCConfigurationList"
    XCRemoteSwiftPackageReference = "XCRemoteSwiftPackageReference"

    UNKNOWN = ""

    @classmethod
    def of(cls, raw):
        if not isinstance(raw, str) or not raw:
            return cls.UNKNOWN
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


# Written on one line inside the objects section.
INLINE_KINDS = frozenset({Isa.PBXBuildFile, Isa.PBXFileReference})

DEFAULT_BUILD_PHASE_NAMES = {
    Isa.PBXSourcesBuildPhase: "Sources",
    Isa.PBXFrameworksBuildPhase: "Frameworks",
    Isa.PBXResourcesBuildPhase: "Resources",
    Isa.PBXHeadersBuildPhase: "Headers",
    Isa.PBXCopyFilesBuildPhase: "CopyFiles",
    Isa.PBXShellScriptBuildPhase: "ShellScript",
    Isa.PBXAppleScriptBuildPhase: "AppleScript",
    Isa.PBXRezBuildPhase: "Rez",
}

_PHASE_KIND = re.compile(r"PBX([a-zA-Z]+)BuildPhase")


def build_phase_name(isa):
    """Name of an unnamed build phase, or "" if ``isa`` gives none."""
    kind = Isa.of(isa)
    if kind in DEFAULT_BUILD_PHASE_NAMES:
        return DEFAULT_BUILD_PHASE_NAMES[kind]
    match = _PHASE_KIND.search(isa)
    return match.group(1) if match else ""
