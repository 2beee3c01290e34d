def format_score(score: int) -> str:
    """UCI score token. Mate scores carry no distance, so they stay in centipawns."""
    return f"cp {score}"


def info_line(depth: int, score: int, nodes: int, move=None) -> str:
    pv = f" pv {move.uci()}" if move is not None else ""
    return f"info depth {depth} score {format_score(score)} nodes {nodes}{pv}"
