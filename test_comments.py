import pytest

from pbxtext import ConsistencyError, create_reference_list


def document(objects, root="ROOT"):
    return {"archiveVersion": 1, "objects": objects, "rootObject": root}


def app_objects(**extra):
    objects = {
        "ROOT": {
            "isa": "PBXProject",
            "buildConfigurationList": "PROJLIST",
            "targets": ["TARGET"],
        },
        "TARGET": {
            "isa": "PBXNativeTarget",
            "name": "App",
            "buildConfigurationList": "TARGETLIST",
            "buildPhases": ["SOURCES", "SCRIPT"],
        },
        "PROJLIST": {"isa": "XCConfigurationList", "buildConfigurations": ["DEBUG"]},
        "TARGETLIST": {"isa": "XCConfigurationList", "buildConfigurations": []},
        "DEBUG": {"isa": "XCBuildConfiguration", "name": "Debug", "buildSettings": {}},
        "SOURCES": {"isa": "PBXSourcesBuildPhase", "files": ["BUILD"]},
        "SCRIPT": {"isa": "PBXShellScriptBuildPhase", "name": "Bundle JS", "files": []},
        "BUILD": {"isa": "PBXBuildFile", "fileRef": "FILE"},
        "FILE": {"isa": "PBXFileReference", "path": "AppDelegate.m"},
    }
    objects.update(extra)
    return objects


# =====================================================
# Rules
# =====================================================

def test_build_file_in_phase():
    comments = create_reference_list(document(app_objects()))
    assert comments["BUILD"] == "AppDelegate.m in Sources"


def test_every_object_gets_a_comment():
    objects = app_objects()
    comments = create_reference_list(document(objects))
    assert set(comments) == set(objects)
    assert comments == {
        "ROOT": "Project object",
        "TARGET": "App",
        "PROJLIST": 'Build configuration list for PBXProject "App"',
        "TARGETLIST": 'Build configuration list for PBXNativeTarget "App"',
        "DEBUG": "Debug",
        "SOURCES": "Sources",
        "SCRIPT": "Bundle JS",
        "BUILD": "AppDelegate.m in Sources",
        "FILE": "AppDelegate.m",
    }


def test_name_wins_over_path():
    objects = app_objects(FILE={"isa": "PBXFileReference", "name": "Delegate", "path": "AppDelegate.m"})
    assert create_reference_list(document(objects))["BUILD"] == "Delegate in Sources"


def test_isa_is_the_last_resort():
    objects = app_objects(GROUP={"isa": "PBXGroup", "children": []})
    assert create_reference_list(document(objects))["GROUP"] == "PBXGroup"


def test_product_name_names_package_products():
    objects = app_objects(
        PRODUCT={"isa": "XCSwiftPackageProductDependency", "productName": "Alamofire"},
        PKGBUILD={"isa": "PBXBuildFile", "productRef": "PRODUCT"},
        FRAMEWORKS={"isa": "PBXFrameworksBuildPhase", "files": ["PKGBUILD"]},
    )
    comments = create_reference_list(document(objects))
    assert comments["PRODUCT"] == "Alamofire"
    assert comments["PKGBUILD"] == "Alamofire in Frameworks"


@pytest.mark.parametrize("isa, expected", [
    ("PBXSourcesBuildPhase", "Sources"),
    ("PBXFrameworksBuildPhase", "Frameworks"),
    ("PBXResourcesBuildPhase", "Resources"),
    ("PBXHeadersBuildPhase", "Headers"),
    ("PBXCopyFilesBuildPhase", "CopyFiles"),
    ("PBXShellScriptBuildPhase", "ShellScript"),
    ("PBXAppleScriptBuildPhase", "AppleScript"),
    ("PBXRezBuildPhase", "Rez"),
])
def test_default_build_phase_names(isa, expected):
    objects = app_objects(PHASE={"isa": isa, "files": []})
    assert create_reference_list(document(objects))["PHASE"] == expected


def test_build_phase_name_derived_from_isa():
    objects = app_objects(
        PHASE={"isa": "PBXExtensionKitBuildPhase", "files": ["EXT"]},
        EXT={"isa": "PBXBuildFile", "fileRef": "FILE"},
    )
    comments = create_reference_list(document(objects))
    assert comments["PHASE"] == "ExtensionKit"
    assert comments["EXT"] == "AppDelegate.m in ExtensionKit"


def test_named_build_phase():
    objects = app_objects(PHASE={"isa": "PBXCopyFilesBuildPhase", "name": "Embed Frameworks", "files": []})
    assert create_reference_list(document(objects))["PHASE"] == "Embed Frameworks"


def test_build_file_outside_any_phase():
    objects = app_objects(LOOSE={"isa": "PBXBuildFile", "fileRef": "FILE"})
    assert create_reference_list(document(objects))["LOOSE"] == "AppDelegate.m in [missing build phase]"


def test_project_config_list_uses_first_target():
    objects = app_objects(
        TARGET={"isa": "PBXNativeTarget", "name": "App", "productName": "AppProduct"},
        OTHER={"isa": "PBXNativeTarget", "name": "Other"},
    )
    objects["ROOT"]["targets"] = ["TARGET", "OTHER"]
    comments = create_reference_list(document(objects))
    assert comments["PROJLIST"] == 'Build configuration list for PBXProject "AppProduct"'


def test_project_config_list_falls_back_to_target_name():
    comments = create_reference_list(document(app_objects()))
    assert "PROXY" not in comments
    assert comments["PROJLIST"] == 'Build configuration list for PBXProject "App"'


def test_project_config_list_borrows_proxy_name():
    objects = app_objects(PROXY={
        "isa": "PBXContainerItemProxy",
        "containerPortal": "ROOT",
        "remoteInfo": "Remote",
    })
    del objects["ROOT"]["targets"]
    comments = create_reference_list(document(objects))
    assert comments["PROJLIST"] == 'Build configuration list for PBXProject "Remote"'
    assert comments["PROXY"] == "PBXContainerItemProxy"


def test_project_config_list_without_any_name():
    objects = app_objects()
    objects["ROOT"]["targets"] = ["MISSING"]
    comments = create_reference_list(document(objects))
    assert comments["PROJLIST"] == 'Build configuration list for PBXProject ""'


def test_unowned_config_list():
    objects = app_objects(ORPHAN={"isa": "XCConfigurationList", "buildConfigurations": []})
    assert create_reference_list(document(objects))["ORPHAN"] == "Build configuration list for [unknown]"


def test_aggregate_target_config_list():
    objects = app_objects(
        AGG={"isa": "PBXAggregateTarget", "name": "Lint", "buildConfigurationList": "AGGLIST"},
        AGGLIST={"isa": "XCConfigurationList", "buildConfigurations": []},
    )
    comments = create_reference_list(document(objects))
    assert comments["AGGLIST"] == 'Build configuration list for PBXAggregateTarget "Lint"'


@pytest.mark.parametrize("url, expected", [
    ("https://github.com/Alamofire/Alamofire", 'XCRemoteSwiftPackageReference "Alamofire"'),
    ("https://github.com/expo/spm-package/", 'XCRemoteSwiftPackageReference "spm-package"'),
    ("https://example.com/pkg.git", 'XCRemoteSwiftPackageReference "https://example.com/pkg.git"'),
])
def test_remote_swift_package(url, expected):
    objects = app_objects(PKG={"isa": "XCRemoteSwiftPackageReference", "repositoryURL": url})
    assert create_reference_list(document(objects))["PKG"] == expected


def test_root_object_is_project_object_whatever_its_isa():
    objects = {"R": {"isa": "Whatever", "name": "ignored"}}
    assert create_reference_list(document(objects, root="R")) == {"R": "Project object"}


def test_empty_document():
    assert create_reference_list({}) == {}


# =====================================================
# Errors
# =====================================================

def test_build_file_with_dangling_ref():
    objects = app_objects(BUILD={"isa": "PBXBuildFile", "fileRef": "NOPE"})
    with pytest.raises(ConsistencyError) as info:
        create_reference_list(document(objects))
    assert info.value.uuid == "BUILD"
    assert str(info.value).startswith("Failed to find comment reference for ID: BUILD, isa: PBXBuildFile")


def test_build_file_without_ref():
    objects = app_objects(BUILD={"isa": "PBXBuildFile"})
    with pytest.raises(ConsistencyError):
        create_reference_list(document(objects))


def test_unnamed_build_phase_without_pbx_prefix_has_no_comment():
    objects = app_objects(PHASE={"isa": "XCFooBuildPhase", "files": []})
    with pytest.raises(ConsistencyError) as info:
        create_reference_list(document(objects))
    assert str(info.value) == "Failed to find comment reference for ID: PHASE, isa: XCFooBuildPhase"


def test_record_without_isa():
    objects = app_objects(BROKEN={"name": "x"})
    with pytest.raises(ConsistencyError) as info:
        create_reference_list(document(objects))
    assert info.value.uuid == "BROKEN"


def test_build_file_referring_to_itself():
    objects = app_objects(
        LOOP={"isa": "PBXBuildFile", "fileRef": "LOOP"},
    )
    with pytest.raises(ConsistencyError, match="circular reference"):
        create_reference_list(document(objects))
