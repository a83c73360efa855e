from .cli import deporder

if __name__ == "__main__":
    deporder()
