from dataclasses import dataclass


@dataclass
class MergeConfig:
    # --- Merge behaviour ---
    strict: bool = False  # Raise instead of dropping unresolved nodes/channels
    scene_index: int = 0  # Scene that receives the attachment root node
    attachment_name: str | None = None  # Optional name for the attachment node

    # --- Output ---
    output: str = "merged.gltf"  # Where the merged document is written

    # --- Logging ---
    log_level: str = "INFO"  # Minimum log level to output
    log_file: str | None = None  # Redirect logs to a file instead of the console
