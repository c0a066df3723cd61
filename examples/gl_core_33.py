"""Shared OpenGL 3.3 core loader with all extensions."""

from gladbuild import add_library


def plan_gl_core_33() -> None:
    rule = add_library("glad_gl_core_33", api="gl:core=3.3", kind="SHARED")
    print(rule.to_dict())


if __name__ == "__main__":
    plan_gl_core_33()
