"""Loaders for a renderer with a GL 4.2 desktop path and a GLES 2 fallback."""

from pathlib import Path

from gladbuild import BuildSettings, Project

ENGINE_EXTENSIONS = (
    "GL_ARB_buffer_storage",
    "GL_ARB_clip_control",
    "GL_ARB_compute_shader",
    "GL_ARB_debug_output",
    "GL_ARB_direct_state_access",
    "GL_ARB_multi_draw_indirect",
    "GL_EXT_clip_control",
    "GL_EXT_sRGB",
    "GL_KHR_debug",
    "GL_OES_vertex_array_object",
)


def configure_engine_loaders() -> None:
    project = Project(settings=BuildSettings(binary_dir=Path("build")))
    project.library(
        "glad_engine",
        api=("gl:core=4.2", "gles2=2.0"),
        kind="STATIC",
        merge=True,
        extensions=ENGINE_EXTENSIONS,
    )
    project.library("glad_vulkan_11", api="vulkan=1.1", kind="SHARED", extensions=["NONE"])
    configured = project.configure()
    for name, rule in configured.rules.items():
        print(name, rule.plan.rendered_args())
    project.generate()


if __name__ == "__main__":
    configure_engine_loaders()
