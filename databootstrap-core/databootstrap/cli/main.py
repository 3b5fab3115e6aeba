def main():
    from .databootstrap import databootstrap

    databootstrap()


if __name__ == "__main__":
    main()
