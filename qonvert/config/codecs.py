"""
Configuration settings related to codec selection and FFmpeg output options.

Codec-specific arguments are policy data: the command builder looks them up here
instead of hard-coding them next to the process handling.
"""

# Codec used when no `--codec` is given, keyed by output file extension.
# Extensions not listed here let FFmpeg pick its own default encoder.
DEFAULT_CODECS = {
    "mp4": "libx265",
}

# Extra arguments appended after `-c:v <codec>`.
CODEC_EXTRA_ARGS = {
    "libx265": (
        # Support h.265 thumbnail previews on Apple devices.
        "-tag:v", "hvc1",
        # The default of 28 has clearly worse quality. 24 looks good enough with significant size improvements.
        "-crf", "24",
    ),
    "hevc_videotoolbox": (
        "-tag:v", "hvc1",
        # 65 is a good quality/size ratio. Any higher and the size explodes.
        "-q:v", "65",
    ),
}

# Output options applied to every conversion.
COMMON_OUTPUT_ARGS = (
    # Allows h.264 and h.265 to start streaming earlier.
    "-movflags", "faststart",
    # Ensure that `.gif` colors are correctly converted.
    "-pix_fmt", "yuv420p",
    # Ensure that the dimensions are divisible by 2.
    "-vf", "crop=trunc(iw/2)*2:trunc(ih/2)*2",
)
