__all__ = ['example', 'calculator']
