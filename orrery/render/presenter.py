"""OpenGL presentation of CPU-rendered RGBA frames as a fullscreen quad."""
from __future__ import annotations

import ctypes
import logging
from array import array
from dataclasses import dataclass

from OpenGL import GL

from orrery.render.errors import RenderError

LOGGER = logging.getLogger(__name__)

VERTEX_POSITION_ATTRIB = 0
VERTEX_TEXCOORD_ATTRIB = 1

# x, y, u, v as a triangle strip. Uploaded rows run top to bottom, so the
# bottom screen edge samples v = 1.
QUAD_VERTICES = (
    -1.0, -1.0, 0.0, 1.0,
    1.0, -1.0, 1.0, 1.0,
    -1.0, 1.0, 0.0, 0.0,
    1.0, 1.0, 1.0, 0.0,
)


def compile_shader(source: str, shader_type: int) -> int:
    shader = GL.glCreateShader(shader_type)
    GL.glShaderSource(shader, source)
    GL.glCompileShader(shader)
    if not GL.glGetShaderiv(shader, GL.GL_COMPILE_STATUS):
        log = GL.glGetShaderInfoLog(shader).decode("utf-8", "ignore")
        GL.glDeleteShader(shader)
        raise RenderError(f"Failed to compile presenter shader: {log}")
    return shader


def link_program(vertex_shader_src: str, fragment_shader_src: str) -> int:
    vertex_shader = compile_shader(vertex_shader_src, GL.GL_VERTEX_SHADER)
    fragment_shader = compile_shader(fragment_shader_src, GL.GL_FRAGMENT_SHADER)
    program = GL.glCreateProgram()
    GL.glAttachShader(program, vertex_shader)
    GL.glAttachShader(program, fragment_shader)
    GL.glLinkProgram(program)
    GL.glDeleteShader(vertex_shader)
    GL.glDeleteShader(fragment_shader)
    if not GL.glGetProgramiv(program, GL.GL_LINK_STATUS):
        log = GL.glGetProgramInfoLog(program).decode("utf-8", "ignore")
        GL.glDeleteProgram(program)
        raise RenderError(f"Failed to link presenter program: {log}")
    return program


@dataclass
class BlitProgram:
    program: int
    texture_location: int

    @classmethod
    def create(cls) -> "BlitProgram":
        vertex_shader = """
            #version 330 core
            layout(location = 0) in vec2 a_position;
            layout(location = 1) in vec2 a_uv;
            out vec2 v_uv;
            void main() {
                v_uv = a_uv;
                gl_Position = vec4(a_position, 0.0, 1.0);
            }
        """
        fragment_shader = """
            #version 330 core
            uniform sampler2D u_texture;
            in vec2 v_uv;
            out vec4 frag_color;
            void main() {
                frag_color = texture(u_texture, v_uv);
            }
        """
        program = link_program(vertex_shader, fragment_shader)
        texture_location = GL.glGetUniformLocation(program, "u_texture")
        return cls(program=program, texture_location=texture_location)


def ensure_default_state() -> None:
    GL.glEnable(GL.GL_BLEND)
    GL.glBlendFunc(GL.GL_SRC_ALPHA, GL.GL_ONE_MINUS_SRC_ALPHA)
    GL.glDisable(GL.GL_DEPTH_TEST)


class TexturePresenter:
    """Streams RGBA bytes into a texture and draws it over the whole window.

    Satisfies the framebuffer ``Presenter`` protocol through ``upload``.
    """

    def __init__(self) -> None:
        self._program = BlitProgram.create()
        self._vao = GL.glGenVertexArrays(1)
        self._vbo = GL.glGenBuffers(1)
        vertices = array("f", QUAD_VERTICES)
        stride = 16
        GL.glBindVertexArray(self._vao)
        GL.glBindBuffer(GL.GL_ARRAY_BUFFER, self._vbo)
        GL.glBufferData(
            GL.GL_ARRAY_BUFFER,
            len(vertices) * vertices.itemsize,
            vertices.tobytes(),
            GL.GL_STATIC_DRAW,
        )
        GL.glEnableVertexAttribArray(VERTEX_POSITION_ATTRIB)
        GL.glVertexAttribPointer(VERTEX_POSITION_ATTRIB, 2, GL.GL_FLOAT, False, stride, ctypes.c_void_p(0))
        GL.glEnableVertexAttribArray(VERTEX_TEXCOORD_ATTRIB)
        GL.glVertexAttribPointer(VERTEX_TEXCOORD_ATTRIB, 2, GL.GL_FLOAT, False, stride, ctypes.c_void_p(8))
        GL.glBindVertexArray(0)
        GL.glBindBuffer(GL.GL_ARRAY_BUFFER, 0)

        self._texture = GL.glGenTextures(1)
        GL.glBindTexture(GL.GL_TEXTURE_2D, self._texture)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_MIN_FILTER, GL.GL_NEAREST)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_MAG_FILTER, GL.GL_NEAREST)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_S, GL.GL_CLAMP_TO_EDGE)
        GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_T, GL.GL_CLAMP_TO_EDGE)
        GL.glBindTexture(GL.GL_TEXTURE_2D, 0)
        self._size: tuple[int, int] = (0, 0)

    def upload(self, data: bytes, size: tuple[int, int]) -> None:
        width, height = size
        GL.glBindTexture(GL.GL_TEXTURE_2D, self._texture)
        GL.glPixelStorei(GL.GL_UNPACK_ALIGNMENT, 1)
        if (width, height) != self._size:
            GL.glTexImage2D(
                GL.GL_TEXTURE_2D,
                0,
                GL.GL_RGBA,
                width,
                height,
                0,
                GL.GL_RGBA,
                GL.GL_UNSIGNED_BYTE,
                data,
            )
            LOGGER.debug("Allocated presenter texture %dx%d", width, height)
            self._size = (width, height)
        else:
            GL.glTexSubImage2D(
                GL.GL_TEXTURE_2D,
                0,
                0,
                0,
                width,
                height,
                GL.GL_RGBA,
                GL.GL_UNSIGNED_BYTE,
                data,
            )
        GL.glBindTexture(GL.GL_TEXTURE_2D, 0)

    def draw(self) -> None:
        if self._size == (0, 0):
            return
        GL.glUseProgram(self._program.program)
        GL.glActiveTexture(GL.GL_TEXTURE0)
        GL.glBindTexture(GL.GL_TEXTURE_2D, self._texture)
        GL.glUniform1i(self._program.texture_location, 0)
        GL.glBindVertexArray(self._vao)
        GL.glDrawArrays(GL.GL_TRIANGLE_STRIP, 0, 4)
        GL.glBindVertexArray(0)
        GL.glBindTexture(GL.GL_TEXTURE_2D, 0)

    def release(self) -> None:
        if getattr(self, "_vao", 0):
            GL.glDeleteVertexArrays(1, [self._vao])
            self._vao = 0
        if getattr(self, "_vbo", 0):
            GL.glDeleteBuffers(1, [self._vbo])
            self._vbo = 0
        if getattr(self, "_texture", 0):
            GL.glDeleteTextures(1, [self._texture])
            self._texture = 0
        if getattr(self, "_program", None) is not None:
            GL.glDeleteProgram(self._program.program)
            self._program = None


__all__ = ["BlitProgram", "TexturePresenter", "compile_shader", "ensure_default_state", "link_program"]
