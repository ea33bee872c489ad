from lambda_invoke._main import main

if __name__ == "__main__":
    main()
