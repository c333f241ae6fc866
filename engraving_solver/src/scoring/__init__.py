from .solution_score import same_piece_count, score_candidate

__all__ = ["same_piece_count", "score_candidate"]
