__all__ = ['ExampleService']
