# どこで: `src/tonelab/core/shader/fragments.py`。
# 何を: 画像表示用の頂点シェーダと、ユーザーコードを挟む固定ヘッダ/フッタを提供する。
# なぜ: ユーザーは `vec3 tonemap(vec3)` だけを書けばよいようにするため。

from __future__ import annotations

DEFAULT_GLSL_VERSION = "330 core"


def vertex_shader_source(glsl_version: str = DEFAULT_GLSL_VERSION) -> str:
    """画像の縦横比を保ったまま全面に四角形を張る頂点シェーダを返す。"""

    return f"""#version {glsl_version}
in vec2 _pos;
out vec2 _uv;
uniform float _viewAspectRatio;
uniform float _imageAspectRatio;

void main() {{
    _uv = _pos;
    vec2 aspectCorrectPos = 2.0 * vec2(_imageAspectRatio / _viewAspectRatio * (_pos.x - 0.5), (_pos.y - 0.5));
    gl_Position = vec4(aspectCorrectPos, 0, 1);
}}
"""


# `_uv` と `_tex` はシナリオ断片（`_dynamic_image()`）からも参照されるため、
# ユーザーコードより前で宣言しておく。
FRAGMENT_SHADER_PRELUDE = """in vec2 _uv;
uniform sampler2D _tex;"""


def fragment_shader_header(glsl_version: str = DEFAULT_GLSL_VERSION) -> str:
    """`#version` 行・精度指定・共有宣言からなる固定ヘッダを返す。"""

    return f"#version {glsl_version}\nprecision mediump float;\n{FRAGMENT_SHADER_PRELUDE}"


FRAGMENT_SHADER_FOOTER = """out vec4 _outputColor;
uniform float _exposure;
uniform bool _showClamp;
uniform bool _pureGammaEncode;

vec3 _sRgbIeotf(vec3 x) {
    if (_pureGammaEncode) {
        return pow(x, vec3(1.0 / 2.2));
    }
    return mix(
        1.055 * pow(x, vec3(1.0 / 2.4)) - 0.055,
        12.92 * x,
        vec3(lessThan(x, vec3(0.0031308)))
    );
}

void main() {
    #ifndef _DYNAMIC_IMAGE
        vec3 x = texture(_tex, _uv).rgb;
        x = max(x, 0.0);
    #else
        vec3 x = _dynamic_image();
        x = max(x, 0.0);
    #endif

    vec3 tonemapped = tonemap(_exposure * x);

    if (_showClamp) {
        if (
            min(tonemapped.r, min(tonemapped.g, tonemapped.b)) < -0.0001
            || max(tonemapped.r, max(tonemapped.g, tonemapped.b)) > 1.0001
        ) tonemapped = vec3(1.0, 0.0, 1.0);
    }
    _outputColor = vec4(_sRgbIeotf(clamp(tonemapped, 0.0, 1.0)), 1.0);
}"""


__all__ = [
    "DEFAULT_GLSL_VERSION",
    "FRAGMENT_SHADER_FOOTER",
    "FRAGMENT_SHADER_PRELUDE",
    "fragment_shader_header",
    "vertex_shader_source",
]
